"""
Consumer for the chat endpoint's Server-Sent-Events body.

Each `data: ` line carries one JSON event (`status`, `content`, `complete`,
`error` or `done`). Lines can be split across network reads, so a trailing
partial line is carried over to the next read, and UTF-8 is decoded
incrementally so a multibyte character split across reads survives.
A `done` or `error` event ends consumption even if more bytes follow.
"""
import codecs
import logging
from contextlib import closing
from typing import Callable, Iterable, Iterator

import requests
from pydantic import ValidationError

from legal_rag_client.core.errors import LegalRagError, StreamUnavailableError
from legal_rag_client.schemas.chat import StreamingChatChunk

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
TERMINAL_TYPES = frozenset({"done", "error"})


def iter_lines(fragments: Iterable[bytes]) -> Iterator[str]:
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    buffer = ""
    for fragment in fragments:
        if not fragment:
            continue
        buffer += decoder.decode(fragment)
        *lines, buffer = buffer.split("\n")
        for line in lines:
            yield line.rstrip("\r")

    buffer += decoder.decode(b"", final=True)
    if buffer:
        yield buffer.rstrip("\r")


def parse_event_line(line: str) -> StreamingChatChunk | None:
    if not line.startswith(DATA_PREFIX):
        return None
    payload = line[len(DATA_PREFIX):]
    if not payload.strip():
        return None
    try:
        return StreamingChatChunk.model_validate_json(payload)
    except ValidationError:
        logger.warning("Failed to parse SSE data: %s", payload)
        return None


def iter_events(fragments: Iterable[bytes]) -> Iterator[StreamingChatChunk]:
    for line in iter_lines(fragments):
        event = parse_event_line(line)
        if event is None:
            continue
        yield event
        if event.type in TERMINAL_TYPES:
            return


def iter_chat_events(response: requests.Response) -> Iterator[StreamingChatChunk]:
    """Lazy, single-pass iterator over the events of a streamed chat response."""
    if response.raw is None:
        raise StreamUnavailableError()
    yield from iter_events(response.iter_content(chunk_size=None))


def consume_chat_stream(
    open_stream: Callable[[], requests.Response],
    on_chunk: Callable[[StreamingChatChunk], None],
    on_error: Callable[[str], None],
    on_complete: Callable[[], None],
) -> None:
    """
    Callback flavour of iter_chat_events.

    on_chunk gets every event except the bare `done` marker. An `error` event is
    also reported through on_error. on_complete fires once when the stream ends,
    normally or on a terminal event. Failing to open or read the stream calls
    on_error only.
    """
    try:
        response = open_stream()
        if response.raw is None:
            raise StreamUnavailableError()
        with closing(response):
            for event in iter_chat_events(response):
                if event.type == "done":
                    break
                on_chunk(event)
                if event.type == "error":
                    on_error(event.message or "Stream error")
                    break
    except (requests.RequestException, LegalRagError) as exc:
        on_error(str(exc) or "Unknown error occurred")
        return

    on_complete()
