from typing import Any

UNKNOWN_DOCUMENT = "Unknown Document"


def _first(md: dict[str, Any], *keys: str, default: Any = None) -> Any:
    # falsy values fall through, same as the backend's own `a or b` chains
    for key in keys:
        value = md.get(key)
        if value:
            return value
    return default


def normalize_citation(md: dict[str, Any], case_id: str | None = None) -> dict[str, Any]:
    """
    Maps a citation payload in either naming convention onto the snake_case fields.

    The chat backend sends `chunk_id`/`id`, `document_id`, `document_name`, `content`,
    `page_number`, `chunk_number`, `score`. Older payloads (and anything we dumped
    ourselves) may instead carry `documentId`, `documentTitle`, `relevantSourceText`
    and `page`.
    """
    document_id = _first(md, "document_id", "documentId", default="")
    content = _first(md, "content", "relevantSourceText", default="")
    return {
        "chunk_id": _first(md, "chunk_id", "id", default=""),
        "content": content,
        "full_content": _first(md, "full_content", default=content),
        "page_number": _first(md, "page_number", "page", default=1),
        "chunk_number": _first(md, "chunk_number", default=0),
        "document_id": document_id,
        "document_name": _first(md, "document_name", "documentTitle", default=document_id or UNKNOWN_DOCUMENT),
        "case_id": case_id if case_id is not None else _first(md, "case_id", default=""),
        "score": _first(md, "score", default=0),
    }


def format_citation(citation: Any) -> str:
    """
    Builds a human-friendly citation label.
    - "<document> p. X"
    - "<document> p. X, chunk N" when the chunk number is known
    """
    base = (getattr(citation, "document_name", "") or "").strip() or "source"
    page = getattr(citation, "page_number", None)
    chunk = getattr(citation, "chunk_number", None)

    label = f"{base} p. {page}" if isinstance(page, int) else base
    if isinstance(chunk, int) and chunk > 0:
        label = f"{label}, chunk {chunk}"
    return label
