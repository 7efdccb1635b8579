from typing import Callable

import requests

from legal_rag_client.api.http import HttpClient, json_or_raise, raise_for_api_error
from legal_rag_client.schemas.documents import (
    Document, DocumentChunks, DocumentView, ProcessingStatus, UploadFile, UploadResponse,
)
from legal_rag_client.services.uploads import SimulatedProgress


class DocumentsApi:
    def __init__(self, http: HttpClient):
        self.http = http

    def upload_documents(
        self,
        case_id: str,
        files: list[UploadFile],
        on_progress: Callable[[int], None] | None = None,
    ) -> UploadResponse:
        """
        Multipart upload of one batch: `case_id` plus a repeated `files` part.

        requests exposes no upload progress, so `on_progress` gets a timed
        approximation followed by 100 on success or 0 on failure.
        """
        progress = SimulatedProgress(on_progress) if on_progress else None
        if progress:
            progress.start()

        try:
            response = self.http.request(
                "/api/documents/upload",
                "POST",
                data={"case_id": case_id},
                files=[("files", (f.name, f.content, f.content_type)) for f in files],
            )
            result = UploadResponse.from_backend(json_or_raise(response) or {})
        except Exception:
            if progress:
                progress.finish(0)
            raise

        if progress:
            progress.finish(100)
        return result

    def get_case_documents(self, case_id: str) -> list[Document]:
        data = json_or_raise(self.http.request(f"/api/documents/{case_id}/documents")) or []
        rows = (data.get("documents") or []) if isinstance(data, dict) else data
        return [Document.model_validate(row) for row in rows]

    def get_document(self, document_id: str) -> DocumentView:
        data = json_or_raise(self.http.request(f"/api/documents/{document_id}/view"))
        return DocumentView.model_validate(data)

    def delete_document(self, document_id: str, case_id: str) -> str:
        data = json_or_raise(
            self.http.request(f"/api/documents/{document_id}", "DELETE", params={"case_id": case_id})
        ) or {}
        return data.get("message", "")

    def get_processing_status(self, case_id: str) -> ProcessingStatus:
        data = json_or_raise(self.http.request(f"/api/documents/{case_id}/processing-status"))
        return ProcessingStatus.model_validate(data.get("status") or data)

    def get_document_chunks(self, document_id: str) -> DocumentChunks:
        data = json_or_raise(self.http.request(f"/api/documents/{document_id}/chunks"))
        return DocumentChunks.model_validate(data)

    def download_document(self, document_id: str) -> bytes:
        response: requests.Response = self.http.request(f"/api/documents/{document_id}/download")
        raise_for_api_error(response)
        return response.content
