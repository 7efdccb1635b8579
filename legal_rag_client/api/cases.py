from typing import Any

from legal_rag_client.api.http import HttpClient, json_or_raise
from legal_rag_client.schemas.cases import Case, CaseDetails, CreateCaseRequest
from legal_rag_client.schemas.documents import ProcessingStatus


class CasesApi:
    def __init__(self, http: HttpClient):
        self.http = http

    def get_cases(self) -> list[Case]:
        data = json_or_raise(self.http.request("/api/cases")) or {}
        # older builds answered with a bare list
        rows = (data.get("cases") or []) if isinstance(data, dict) else data
        return [Case.model_validate(row) for row in rows]

    def get_case(self, case_id: str) -> CaseDetails:
        data = json_or_raise(self.http.request(f"/api/cases/{case_id}"))
        return CaseDetails.model_validate(data)

    def create_case(self, payload: CreateCaseRequest) -> Case:
        data = json_or_raise(
            self.http.request("/api/cases", "POST", json_body=payload.model_dump(exclude_none=True))
        )
        return Case.model_validate(data.get("case") or data)

    def update_case(self, case_id: str, updates: dict[str, Any]) -> Case:
        data = json_or_raise(self.http.request(f"/api/cases/{case_id}", "PUT", json_body=updates))
        return Case.model_validate(data.get("case") or data)

    def get_processing_status(self, case_id: str) -> ProcessingStatus:
        data = json_or_raise(self.http.request(f"/api/cases/{case_id}/processing-status"))
        return ProcessingStatus.model_validate(data.get("status") or data)
