from legal_rag_client.api.auth import AuthApi
from legal_rag_client.api.cases import CasesApi
from legal_rag_client.api.chat import ChatApi
from legal_rag_client.api.documents import DocumentsApi
from legal_rag_client.api.http import HttpClient, json_or_raise


class ApiService:
    def __init__(self, http: HttpClient, *, stream_timeout: float = 300.0):
        self.http = http
        self.auth = AuthApi(http)
        self.cases = CasesApi(http)
        self.documents = DocumentsApi(http)
        self.chat = ChatApi(http, stream_timeout=stream_timeout)

    def health_check(self) -> dict:
        return json_or_raise(self.http.request("/api/health")) or {}
