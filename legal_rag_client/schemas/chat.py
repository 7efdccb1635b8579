from datetime import datetime, timezone
from typing import Any, Literal
from uuid import uuid4
from pydantic import BaseModel, Field, computed_field, model_validator

from legal_rag_client.utils.citations import normalize_citation

ChatRole = Literal["user", "assistant"]
StreamEventType = Literal["status", "content", "complete", "error", "done"]

class Citation(BaseModel):
    chunk_id: str = ""
    content: str = ""              # short excerpt shown inline
    full_content: str = ""         # shown in the citation modal
    page_number: int = 1
    chunk_number: int = 0
    document_id: str = ""
    document_name: str = ""
    case_id: str = ""
    score: float = 0.0             # 0..1 relevance

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return normalize_citation(data, case_id=data.get("case_id"))
        return data

    @classmethod
    def from_backend(cls, data: dict[str, Any], case_id: str) -> "Citation":
        return cls.model_validate(normalize_citation(data, case_id=case_id))

    # camelCase view kept for consumers of the older citation shape

    @computed_field
    @property
    def id(self) -> str:
        return self.chunk_id

    @computed_field
    @property
    def documentId(self) -> str:
        return self.document_id

    @computed_field
    @property
    def documentTitle(self) -> str:
        return self.document_name

    @computed_field
    @property
    def relevantSourceText(self) -> str:
        return self.content

    @computed_field
    @property
    def page(self) -> int:
        return self.page_number

def _now() -> datetime:
    return datetime.now(timezone.utc)

class ChatMessage(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    thread_id: str | None = None
    role: ChatRole
    content: str
    citations: list[Citation] | None = None
    created_at: datetime = Field(default_factory=_now)

class ChatThread(BaseModel):
    id: str
    case_id: str
    user_id: str = ""
    title: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

class ChatRequest(BaseModel):
    case_id: str
    query: str
    user_id: str = "default-user"
    thread_id: str | None = None
    document_ids: list[str] | None = None

class ChatResponse(BaseModel):
    response: str
    citations: list[Citation] = Field(default_factory=list)
    search_results_count: int = 0
    message_id: str | None = None

class ChatHistory(BaseModel):
    messages: list[ChatMessage] = Field(default_factory=list)
    count: int = 0

class StreamingChatChunk(BaseModel):
    type: StreamEventType
    message: str | None = None
    content: str | None = None
    citations: list[Citation] | None = None
    search_results_count: int | None = None
    message_id: str | None = None

class SearchResult(BaseModel):
    id: str
    score: float = 0.0
    content: str = ""
    chunk_number: int = 0
    page_number: int | None = None
    document_id: str = ""
    document_name: str = ""
    case_id: str = ""
    search_type: Literal["semantic", "keyword"] = "semantic"
    metadata: dict[str, Any] = Field(default_factory=dict)

class SearchResults(BaseModel):
    results: list[SearchResult] = Field(default_factory=list)
    count: int = 0
