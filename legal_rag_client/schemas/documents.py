from datetime import datetime
from pathlib import Path
from typing import Any, Literal
from pydantic import BaseModel, Field

ProcessingState = Literal["pending", "completed", "failed"]

class Document(BaseModel):
    id: str
    case_id: str
    filename: str
    file_size: int = 0
    file_extension: str = ""
    processing_status: ProcessingState = "pending"
    error_message: str | None = None
    raw_text: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

class DocumentChunk(BaseModel):
    id: str
    document_id: str
    case_id: str = ""
    chunk_text: str
    chunk_number: int = 0
    page_number: int | None = None
    token_count: int = 0
    qdrant_point_id: str | None = None
    created_at: datetime | None = None
    document_name: str | None = None

class StatusCounts(BaseModel):
    pending: int = 0
    completed: int = 0
    failed: int = 0

class ProcessingStatus(BaseModel):
    total_documents: int = 0
    status_counts: StatusCounts = Field(default_factory=StatusCounts)
    documents: list[Document] = Field(default_factory=list)

class DocumentView(BaseModel):
    document: Document
    chunks: list[dict[str, Any]] = Field(default_factory=list)
    chunk_count: int = 0

class DocumentChunks(BaseModel):
    chunks: list[dict[str, Any]] = Field(default_factory=list)
    count: int = 0

class UploadResponse(BaseModel):
    success: bool
    message: str | None = None
    successful_documents: list[dict[str, Any]] = Field(default_factory=list)
    failed_documents: list[dict[str, Any]] = Field(default_factory=list)
    total_chunks: int | None = None
    total_tokens: int | None = None
    successful_count: int = 0
    failed_count: int = 0

    @classmethod
    def from_backend(cls, data: dict[str, Any]) -> "UploadResponse":
        # upload endpoint reports results/failed + *_files counters
        return cls(
            success=bool(data.get("success")),
            message=data.get("message"),
            successful_documents=data.get("results") or [],
            failed_documents=data.get("failed") or [],
            total_chunks=data.get("total_chunks"),
            total_tokens=data.get("total_tokens"),
            successful_count=data.get("successful_files") or 0,
            failed_count=data.get("failed_files") or 0,
        )

_CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".txt": "text/plain",
}

class UploadFile(BaseModel):
    """A file picked for upload, held in memory until the batch is sent."""
    name: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: str | Path) -> "UploadFile":
        path = Path(path)
        return cls(
            name=path.name,
            content=path.read_bytes(),
            content_type=_CONTENT_TYPES.get(path.suffix.lower(), "application/octet-stream"),
        )
