import json
import logging
import threading
from typing import Any, Callable

import requests

from legal_rag_client.core.errors import ApiError

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], "str | None"]

# 401s on these endpoints are answers to the auth call itself, not an expired session
_AUTH_EXEMPT = frozenset({"login", "logout"})


def _no_token() -> str | None:
    return None


class HttpClient:
    """
    Thin wrapper over requests.Session that talks to the backend.

    - attaches `Authorization: Bearer <token>` from the registered token provider
    - sends JSON content-type unless the body is multipart
    - turns a 401 into a single forced logout and a synthetic "Session expired" response
    """

    def __init__(self, base_url: str, *, timeout: float = 60.0, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owned_session = session is None
        self._session = session or requests.Session()

        self._token_provider: TokenProvider = _no_token
        self._on_unauthorized: Callable[[], None] | None = None
        # bumped on every auth change; a 401 only logs out the epoch it was sent under
        self._auth_epoch = 0
        self._auth_lock = threading.RLock()

    def set_auth_handlers(self, token_provider: TokenProvider, on_unauthorized: Callable[[], None] | None) -> None:
        with self._auth_lock:
            self._token_provider = token_provider
            self._on_unauthorized = on_unauthorized
            self._auth_epoch += 1

    def close(self) -> None:
        if self._owned_session:
            self._session.close()

    def url_for(self, path: str) -> str:
        path_norm = path if path.startswith("/") else f"/{path}"
        return f"{self.base_url}{path_norm}"

    def request(
        self,
        path: str,
        method: str = "GET",
        *,
        params: dict[str, Any] | None = None,
        json_body: Any | None = None,
        data: dict[str, Any] | None = None,
        files: list[tuple[str, tuple[str, bytes, str]]] | None = None,
        headers: dict[str, str] | None = None,
        stream: bool = False,
        timeout: float | None = None,
        use_session_auth: bool = True,
    ) -> requests.Response:
        merged: dict[str, str] = {}
        if files is None:
            merged["Content-Type"] = "application/json"
        merged.update(headers or {})

        epoch = self._auth_epoch
        if use_session_auth:
            token = self._token_provider()
            if token:
                merged["Authorization"] = f"Bearer {token}"

        response = self._session.request(
            method,
            self.url_for(path),
            params=params,
            json=json_body,
            data=data,
            files=files,
            headers=merged,
            stream=stream,
            timeout=timeout or self.timeout,
        )

        if response.status_code == 401 and use_session_auth and not _is_auth_exempt(path):
            response.close()
            self._handle_unauthorized(epoch)
            return _session_expired(response.request)

        return response

    def _handle_unauthorized(self, epoch: int) -> None:
        with self._auth_lock:
            if epoch != self._auth_epoch or self._on_unauthorized is None:
                return
            logger.warning("Backend answered 401, forcing logout")
            try:
                self._on_unauthorized()
            finally:
                self._auth_epoch += 1


def _is_auth_exempt(path: str) -> bool:
    last_segment = path.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]
    return last_segment in _AUTH_EXEMPT


def _session_expired(request: requests.PreparedRequest | None) -> requests.Response:
    response = requests.Response()
    response.status_code = 401
    response.reason = "Unauthorized"
    response.headers["Content-Type"] = "application/json"
    response.encoding = "utf-8"
    response._content = json.dumps({"error": "Session expired"}).encode("utf-8")
    response.request = request
    response.url = request.url if request is not None else ""
    return response


def error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return "Unknown error"
    message = None
    if isinstance(data, dict):
        message = data.get("error") or data.get("detail")
    if isinstance(message, str) and message:
        return message
    return f"HTTP error! status: {response.status_code}"


def raise_for_api_error(response: requests.Response) -> None:
    if not response.ok:
        raise ApiError(error_message(response), status=response.status_code)


def json_or_raise(response: requests.Response) -> Any:
    raise_for_api_error(response)
    if not response.content:
        return None
    return response.json()
