import json
import threading
from typing import Any, Callable
from urllib.parse import parse_qs, urlparse

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from legal_rag_client.api.http import HttpClient
from legal_rag_client.core.config import Settings
from legal_rag_client.main import create_app

BASE_URL = "http://test"


class FakeRaw:
    """Stands in for urllib3's response: hands the body out in fixed fragments."""

    def __init__(self, fragments: list[bytes]):
        self.fragments = list(fragments)
        self.reads = 0
        self.closed = False

    def stream(self, chunk_size=None, decode_content=True):
        for fragment in self.fragments:
            self.reads += 1
            yield fragment

    def read(self, amt=None, decode_content=True):
        return b"".join(self.fragments)

    def close(self):
        self.closed = True

    def release_conn(self):
        pass


def make_response(
    request: requests.PreparedRequest | None = None,
    *,
    status: int = 200,
    json_data: Any = None,
    fragments: list[bytes] | None = None,
    headers: dict[str, str] | None = None,
) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.reason = "OK" if status < 400 else "Error"
    response.headers = CaseInsensitiveDict(headers or {})
    if json_data is not None:
        fragments = [json.dumps(json_data).encode("utf-8")]
        response.headers.setdefault("Content-Type", "application/json")
    response.raw = FakeRaw(fragments or [])
    response.encoding = "utf-8"
    response.request = request
    response.url = request.url if request is not None else BASE_URL
    return response


def reply(status: int = 200, json_data: Any = None, fragments: list[bytes] | None = None) -> dict:
    return {"status": status, "json_data": json_data, "fragments": fragments}


def sse(*events: dict) -> list[bytes]:
    return [f"data: {json.dumps(e)}\n".encode("utf-8") for e in events]


class FakeBackend(BaseAdapter):
    """
    Route table keyed by (method, path). A route is either a reply() dict or a
    callable(request) returning one; a callable may also raise.
    """

    def __init__(self):
        super().__init__()
        self.routes: dict[tuple[str, str], dict | Callable] = {}
        self.calls: list[requests.PreparedRequest] = []
        self._lock = threading.Lock()

    def add(self, method: str, path: str, route: dict | Callable) -> None:
        self.routes[(method.upper(), path)] = route

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        path = urlparse(request.url).path
        with self._lock:
            self.calls.append(request)
        route = self.routes.get((request.method, path))
        if route is None:
            answer = reply(404, {"error": f"no route for {request.method} {path}"})
        elif callable(route):
            answer = route(request)
        else:
            answer = route
        return make_response(request, **answer)

    def close(self):
        pass

    def calls_to(self, method: str, path: str) -> list[requests.PreparedRequest]:
        return [c for c in self.calls if c.method == method and urlparse(c.url).path == path]


def query_of(request: requests.PreparedRequest) -> dict[str, list[str]]:
    return parse_qs(urlparse(request.url).query)


def json_of(request: requests.PreparedRequest) -> Any:
    return json.loads(request.body)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def http_session(backend) -> requests.Session:
    session = requests.Session()
    session.trust_env = False
    session.mount(BASE_URL, backend)
    return session


@pytest.fixture
def http(http_session) -> HttpClient:
    return HttpClient(BASE_URL, timeout=1.0, session=http_session)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        API_URL=BASE_URL,
        MAX_FILES_PER_UPLOAD=3,
        MAX_FILE_SIZE_MB=1,
        TOKEN_STORE_PATH=None,
        LOGIN_REDIRECT_DELAY_S=0.0,
    )


class Recorder:
    def __init__(self):
        self.navigations: list[str] = []
        self.notifications: list[tuple[str, str]] = []

    def navigate(self, path: str) -> None:
        self.navigations.append(path)

    def notify(self, level: str, message: str) -> None:
        self.notifications.append((level, message))

    @staticmethod
    def schedule(delay: float, fn: Callable[[], None]) -> None:
        fn()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def app(settings, http_session, recorder):
    return create_app(
        settings,
        http_session=http_session,
        navigate=recorder.navigate,
        schedule=recorder.schedule,
        notify=recorder.notify,
    )


USER = {"id": "u-1", "email": "ada@example.com", "name": "Ada", "is_active": True}


def case_row(case_id: str, title: str = "Smith v. Jones", **extra) -> dict:
    return {"id": case_id, "user_id": "u-1", "title": title, "status": "active", **extra}


def document_row(doc_id: str, case_id: str = "c-1", filename: str = "brief.pdf", **extra) -> dict:
    return {
        "id": doc_id,
        "case_id": case_id,
        "filename": filename,
        "file_size": 1024,
        "file_extension": "pdf",
        "processing_status": "completed",
        **extra,
    }
