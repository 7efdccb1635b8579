from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field

from legal_rag_client.schemas.documents import Document, ProcessingStatus

CaseStatus = Literal["active", "archived", "completed"]

class Case(BaseModel):
    id: str
    user_id: str = ""
    title: str
    description: str | None = None
    status: CaseStatus = "active"
    qdrant_collection_name: str | None = None  # backend-side, passed through untouched
    created_at: datetime | None = None
    updated_at: datetime | None = None

class CreateCaseRequest(BaseModel):
    title: str
    description: str | None = None
    user_id: str | None = None

class CaseDetails(BaseModel):
    case: Case
    documents: list[Document] = Field(default_factory=list)
    processing_status: ProcessingStatus | None = None
