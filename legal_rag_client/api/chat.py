from typing import Callable, Iterator

import requests

from legal_rag_client.api.http import HttpClient, json_or_raise
from legal_rag_client.core.errors import ApiError
from legal_rag_client.schemas.chat import (
    ChatHistory, ChatRequest, ChatResponse, Citation, SearchResults, StreamingChatChunk,
)
from legal_rag_client.services.streaming import consume_chat_stream, iter_chat_events


class ChatApi:
    def __init__(self, http: HttpClient, *, stream_timeout: float = 300.0):
        self.http = http
        self.stream_timeout = stream_timeout

    def chat_with_case(self, case_id: str, query: str, user_id: str = "default-user") -> ChatResponse:
        data = json_or_raise(self.http.request(
            "/api/chat/chat",
            "POST",
            json_body={"case_id": case_id, "query": query, "user_id": user_id},
        ))
        return ChatResponse(
            response=data.get("response") or "",
            citations=[Citation.from_backend(c, case_id) for c in data.get("citations") or []],
            search_results_count=data.get("search_results_count") or 0,
            message_id=data.get("message_id"),
        )

    def get_chat_history(self, case_id: str, limit: int = 50) -> ChatHistory:
        data = json_or_raise(self.http.request(f"/api/chat/history/{case_id}", params={"limit": limit}))
        return ChatHistory.model_validate(data)

    def open_chat_stream(self, request: ChatRequest) -> requests.Response:
        response = self.http.request(
            "/api/chat/chat",
            "POST",
            json_body=request.model_dump(exclude_none=True),
            headers={"Accept": "text/event-stream"},
            stream=True,
            timeout=self.stream_timeout,
        )
        if not response.ok:
            response.close()
            raise ApiError(f"HTTP error! status: {response.status_code}", status=response.status_code)
        return response

    def stream_chat(
        self,
        request: ChatRequest,
        on_chunk: Callable[[StreamingChatChunk], None],
        on_error: Callable[[str], None],
        on_complete: Callable[[], None],
    ) -> None:
        consume_chat_stream(lambda: self.open_chat_stream(request), on_chunk, on_error, on_complete)

    def iter_chat(self, request: ChatRequest) -> Iterator[StreamingChatChunk]:
        response = self.open_chat_stream(request)
        with response:
            yield from iter_chat_events(response)

    def get_citation_details(self, chunk_id: str) -> Citation:
        data = json_or_raise(self.http.request(f"/api/chat/citations/{chunk_id}"))
        return Citation.model_validate(data.get("citation") or data)

    def search_documents(self, case_id: str, query: str, document_ids: list[str] | None = None) -> SearchResults:
        data = json_or_raise(self.http.request(
            "/api/chat/search",
            "POST",
            json_body={"case_id": case_id, "query": query, "document_ids": document_ids},
        ))
        return SearchResults.model_validate(data)
