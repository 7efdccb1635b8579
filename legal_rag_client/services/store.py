"""
Application state container.

State is an immutable AppState snapshot. Actions compute the next snapshot from
the current one, swap it in, then notify subscribers. Nothing in here talks to
the network.
"""
import threading
from dataclasses import dataclass, replace
from typing import Any, Callable, Literal

from legal_rag_client.schemas.cases import Case
from legal_rag_client.schemas.chat import ChatMessage, ChatThread, Citation
from legal_rag_client.schemas.documents import Document
from legal_rag_client.services.uploads import UploadBatch

Theme = Literal["light", "dark", "system"]
_THEMES = ("light", "dark", "system")


@dataclass(frozen=True)
class AppState:
    sidebar_open: bool = True
    current_case: Case | None = None
    current_thread: ChatThread | None = None
    is_loading: bool = False
    error: str | None = None

    cases: tuple[Case, ...] = ()
    documents: tuple[Document, ...] = ()

    chat_messages: tuple[ChatMessage, ...] = ()
    selected_citation: Citation | None = None
    is_typing: bool = False
    streaming_content: str = ""

    create_case_modal_open: bool = False
    citation_modal_open: bool = False

    upload_batch: UploadBatch | None = None
    upload_panel_open: bool = False

    theme: Theme = "system"


Listener = Callable[[AppState], None]
Reducer = Callable[[AppState], dict[str, Any]]


class AppStore:
    def __init__(self, state: AppState | None = None):
        self._state = state or AppState()
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _apply(self, reducer: Reducer) -> AppState:
        with self._lock:
            self._state = replace(self._state, **reducer(self._state))
            state = self._state
        for listener in list(self._listeners):
            listener(state)
        return state

    def reset(self) -> None:
        self._apply(lambda s: vars(AppState(theme=s.theme)))

    # ui

    def set_sidebar_open(self, open_: bool) -> None:
        self._apply(lambda s: {"sidebar_open": open_})

    def toggle_sidebar(self) -> None:
        self._apply(lambda s: {"sidebar_open": not s.sidebar_open})

    def set_is_loading(self, loading: bool) -> None:
        self._apply(lambda s: {"is_loading": loading})

    def set_error(self, error: str | None) -> None:
        self._apply(lambda s: {"error": error})

    def clear_error(self) -> None:
        self._apply(lambda s: {"error": None})

    def set_create_case_modal_open(self, open_: bool) -> None:
        self._apply(lambda s: {"create_case_modal_open": open_})

    def set_citation_modal_open(self, open_: bool) -> None:
        self._apply(lambda s: {"citation_modal_open": open_})

    def set_theme(self, theme: Theme) -> None:
        if theme not in _THEMES:
            raise ValueError(f"theme must be one of {_THEMES}")
        self._apply(lambda s: {"theme": theme})

    # selections

    def set_current_case(self, case: Case | None) -> None:
        self._apply(lambda s: {
            "current_case": case,
            "current_thread": None,
            "chat_messages": (),
            "streaming_content": "",
            "selected_citation": None,
            "documents": (),
        })

    def set_current_thread(self, thread: ChatThread | None) -> None:
        self._apply(lambda s: {
            "current_thread": thread,
            "chat_messages": (),
            "streaming_content": "",
            "selected_citation": None,
        })

    # cases

    def set_cases(self, cases: list[Case]) -> None:
        self._apply(lambda s: {"cases": tuple(cases)})

    def add_case(self, case: Case) -> None:
        self._apply(lambda s: {"cases": (case, *s.cases)})

    def update_case(self, case_id: str, **updates: Any) -> None:
        def reducer(s: AppState) -> dict[str, Any]:
            current = s.current_case
            if current is not None and current.id == case_id:
                current = current.model_copy(update=updates)
            return {
                "cases": tuple(c.model_copy(update=updates) if c.id == case_id else c for c in s.cases),
                "current_case": current,
            }
        self._apply(reducer)

    def remove_case(self, case_id: str) -> None:
        def reducer(s: AppState) -> dict[str, Any]:
            changes: dict[str, Any] = {"cases": tuple(c for c in s.cases if c.id != case_id)}
            if s.current_case is not None and s.current_case.id == case_id:
                changes.update(current_case=None, current_thread=None, chat_messages=())
            return changes
        self._apply(reducer)

    # documents

    def set_documents(self, documents: list[Document]) -> None:
        self._apply(lambda s: {"documents": tuple(documents)})

    def remove_document(self, document_id: str) -> None:
        self._apply(lambda s: {"documents": tuple(d for d in s.documents if d.id != document_id)})

    # chat

    def set_chat_messages(self, messages: list[ChatMessage]) -> None:
        self._apply(lambda s: {"chat_messages": tuple(messages)})

    def add_chat_message(self, message: ChatMessage) -> None:
        self._apply(lambda s: {"chat_messages": (*s.chat_messages, message)})

    def clear_chat_messages(self) -> None:
        self._apply(lambda s: {"chat_messages": ()})

    def set_selected_citation(self, citation: Citation | None) -> None:
        self._apply(lambda s: {"selected_citation": citation})

    def set_is_typing(self, typing: bool) -> None:
        self._apply(lambda s: {"is_typing": typing})

    def set_streaming_content(self, content: str) -> None:
        self._apply(lambda s: {"streaming_content": content})

    def append_streaming_content(self, content: str) -> None:
        self._apply(lambda s: {"streaming_content": s.streaming_content + content})

    def clear_streaming_content(self) -> None:
        self._apply(lambda s: {"streaming_content": ""})

    # upload progress panel

    def start_upload(self, names: list[str]) -> None:
        self._apply(lambda s: {"upload_batch": UploadBatch.start(names), "upload_panel_open": True})

    def set_upload_progress(self, progress: int) -> None:
        def reducer(s: AppState) -> dict[str, Any]:
            if s.upload_batch is None:
                return {}
            return {"upload_batch": s.upload_batch.with_progress(progress)}
        self._apply(reducer)

    def finish_upload(self, completed: list[str], failed: list[str]) -> None:
        def reducer(s: AppState) -> dict[str, Any]:
            batch = s.upload_batch or UploadBatch()
            return {"upload_batch": batch.resolve(completed, failed)}
        self._apply(reducer)

    def dismiss_upload(self) -> None:
        def reducer(s: AppState) -> dict[str, Any]:
            batch = s.upload_batch
            # an unresolved batch stays tracked, only the panel closes
            if batch is not None and not batch.is_resolved:
                return {"upload_panel_open": False}
            return {"upload_panel_open": False, "upload_batch": None}
        self._apply(reducer)
