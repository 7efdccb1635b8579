"""
Authentication state for one client session.

The access token lives in memory; every change goes through _sync_token, which
mirrors it into the token storage slot and re-registers the HTTP client's auth
handlers so no request is ever sent with a stale token.
"""
import logging
import threading
from typing import Any, Callable

import requests
from pydantic import ValidationError

from legal_rag_client.api.auth import AuthApi
from legal_rag_client.api.http import HttpClient
from legal_rag_client.core.storage import MemoryTokenStorage, TokenStorage
from legal_rag_client.schemas.auth import AuthResult, LoginIn, RegisterIn, User

logger = logging.getLogger(__name__)

Navigator = Callable[[str], None]
Scheduler = Callable[[float, Callable[[], None]], None]

NETWORK_ERROR = "Network error occurred"


def _log_navigation(path: str) -> None:
    logger.info("Navigate to %s", path)


def _timer_schedule(delay: float, fn: Callable[[], None]) -> None:
    timer = threading.Timer(delay, fn)
    timer.daemon = True
    timer.start()


def _json_body(response: requests.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _parse_user(raw: Any) -> User | None:
    if not isinstance(raw, dict):
        return None
    try:
        return User.model_validate(raw)
    except ValidationError:
        logger.warning("Ignoring malformed user payload")
        return None


class Session:
    def __init__(
        self,
        http: HttpClient,
        *,
        storage: TokenStorage | None = None,
        navigate: Navigator | None = None,
        schedule: Scheduler | None = None,
        redirect_delay_s: float = 0.1,
    ):
        self.http = http
        self.auth = AuthApi(http)
        self.storage = storage or MemoryTokenStorage()
        self.redirect_delay_s = redirect_delay_s
        self._navigate = navigate or _log_navigation
        self._schedule = schedule or _timer_schedule

        self.user: User | None = None
        self.is_loading = False
        self._token: str | None = None
        self._logout_listeners: list[Callable[[], None]] = []

        self.http.set_auth_handlers(self.get_token, self.logout)

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def get_token(self) -> str | None:
        return self._token

    def add_logout_listener(self, listener: Callable[[], None]) -> None:
        self._logout_listeners.append(listener)

    def _sync_token(self, token: str | None) -> None:
        self._token = token
        if token:
            self.storage.save(token)
        else:
            self.storage.clear()
        self.http.set_auth_handlers(self.get_token, self.logout)

    def _clear(self) -> None:
        self._sync_token(None)
        self.user = None

    def initialize(self) -> bool:
        """Restores the session from the storage slot, if a token was left there."""
        self.is_loading = True
        try:
            token = self.storage.load()
            if not token:
                return False
            return self.verify_token(token)
        finally:
            self.is_loading = False

    def login(self, email: str, password: str) -> AuthResult:
        self.is_loading = True
        try:
            response = self.auth.login(LoginIn(email=email, password=password))
            data = _json_body(response)
            token = data.get("access_token")
            if response.ok and token:
                user = _parse_user(data.get("user"))
                self._sync_token(token)
                self.user = user
                self._schedule(self.redirect_delay_s, lambda: self._navigate("/"))
                return AuthResult(success=True, user=user)
            return AuthResult(success=False, error=data.get("error") or "Login failed")
        except requests.RequestException:
            logger.exception("Login error")
            return AuthResult(success=False, error=NETWORK_ERROR)
        finally:
            self.is_loading = False

    def register(self, *, email: str, name: str, password: str, super_key: str) -> AuthResult:
        self.is_loading = True
        try:
            response = self.auth.register(
                RegisterIn(email=email, name=name, password=password, super_key=super_key)
            )
            data = _json_body(response)
            token = data.get("access_token")
            if response.ok and token:
                user = _parse_user(data.get("user"))
                self._sync_token(token)
                self.user = user
                return AuthResult(success=True, user=user)
            return AuthResult(success=False, error=data.get("error") or "Registration failed")
        except requests.RequestException:
            logger.exception("Registration error")
            return AuthResult(success=False, error=NETWORK_ERROR)
        finally:
            self.is_loading = False

    def logout(self) -> None:
        token = self._token
        try:
            if token:
                self.auth.logout(token)
        except requests.RequestException:
            # server-side invalidation is best effort
            logger.exception("Logout error")
        finally:
            self._clear()
            for listener in list(self._logout_listeners):
                listener()
            self._navigate("/login")

    def verify_token(self, token: str) -> bool:
        try:
            response = self.auth.verify_token(token)
            if response.ok:
                data = _json_body(response)
                user = _parse_user(data.get("user")) if data.get("valid") else None
                if user is not None:
                    self.user = user
                    self._sync_token(token)
                    return True
        except requests.RequestException:
            logger.exception("Token verification failed")

        self._clear()
        return False
