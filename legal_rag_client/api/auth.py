import requests

from legal_rag_client.api.http import HttpClient
from legal_rag_client.schemas.auth import LoginIn, RegisterIn


class AuthApi:
    """
    Raw auth calls. They hand back the response untouched; the session decides
    what counts as success.
    """

    def __init__(self, http: HttpClient):
        self.http = http

    def login(self, payload: LoginIn) -> requests.Response:
        return self.http.request(
            "/api/auth/login", "POST", json_body=payload.model_dump(), use_session_auth=False
        )

    def register(self, payload: RegisterIn) -> requests.Response:
        return self.http.request(
            "/api/auth/register", "POST", json_body=payload.model_dump(), use_session_auth=False
        )

    def logout(self, token: str) -> requests.Response:
        return self.http.request(
            "/api/auth/logout",
            "POST",
            headers={"Authorization": f"Bearer {token}"},
            use_session_auth=False,
        )

    def verify_token(self, token: str) -> requests.Response:
        return self.http.request(
            "/api/auth/verify-token",
            headers={"Authorization": f"Bearer {token}"},
            use_session_auth=False,
        )
