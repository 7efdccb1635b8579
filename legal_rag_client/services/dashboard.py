"""
User-level actions: each one calls the API, then records the outcome in the store.
Failures become a store error plus a notification; nothing here is fatal.
"""
import logging
from typing import Callable, Iterable

import requests
from pydantic import ValidationError

from legal_rag_client.api import ApiService
from legal_rag_client.core.config import Settings
from legal_rag_client.core.errors import ApiError, FormValidationError, UploadValidationError
from legal_rag_client.schemas.cases import Case, CreateCaseRequest
from legal_rag_client.schemas.chat import ChatMessage, ChatRequest, Citation, StreamingChatChunk
from legal_rag_client.schemas.documents import Document, UploadFile, UploadResponse
from legal_rag_client.services.session import Session
from legal_rag_client.services.store import AppStore
from legal_rag_client.services.uploads import select_files
from legal_rag_client.utils.validators import validate_case_form

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]

# malformed rows surface as ValidationError and are reported like any backend failure
BACKEND_ERRORS = (requests.RequestException, ApiError, ValidationError)

_LEVELS = {"success": logging.INFO, "info": logging.INFO, "error": logging.ERROR}


def _log_notification(level: str, message: str) -> None:
    logger.log(_LEVELS.get(level, logging.INFO), message)


def _user_message(exc: Exception, fallback: str) -> str:
    # backend errors carry a readable message; transport errors get the generic one
    if isinstance(exc, ApiError) and exc.message:
        return exc.message
    return fallback


class Dashboard:
    def __init__(
        self,
        api: ApiService,
        session: Session,
        store: AppStore,
        *,
        settings: Settings,
        notify: Notifier | None = None,
    ):
        self.api = api
        self.session = session
        self.store = store
        self.settings = settings
        self.notify = notify or _log_notification

    def _report(self, exc: Exception, fallback: str) -> str:
        message = _user_message(exc, fallback)
        logger.error("%s: %s", fallback, exc)
        self.store.set_error(message)
        self.notify("error", message)
        return message

    def _user_id(self) -> str:
        user = self.session.user
        return user.id if user is not None else "default-user"

    def health(self) -> dict:
        return self.api.health_check()

    # cases

    def load_cases(self) -> list[Case]:
        self.store.set_is_loading(True)
        try:
            cases = self.api.cases.get_cases()
        except BACKEND_ERRORS as exc:
            self._report(exc, "Failed to load cases")
            return []
        finally:
            self.store.set_is_loading(False)

        self.store.set_cases(cases)
        if cases and self.store.state.current_case is None:
            self.select_case(cases[0])
        return cases

    def select_case(self, case: Case) -> None:
        self.store.set_current_case(case)
        self.load_case_details(case.id)

    def load_case_details(self, case_id: str) -> None:
        try:
            details = self.api.cases.get_case(case_id)
            history = self.api.chat.get_chat_history(case_id, limit=self.settings.CHAT_HISTORY_LIMIT)
        except BACKEND_ERRORS as exc:
            self._report(exc, "Failed to load case details")
            return

        self.store.set_documents(details.documents)
        self.store.set_chat_messages(history.messages)

    def create_case(self, title: str, description: str = "", files: Iterable[UploadFile] = ()) -> Case | None:
        """
        Validates the form and every attached file before the case is created;
        any invalid file rejects the whole request.
        """
        errors = validate_case_form(title)
        if errors:
            raise FormValidationError(errors)

        selection = select_files(files, self.settings)
        if selection.errors:
            for error in selection.errors:
                self.notify("error", error)
            raise UploadValidationError(selection.errors)

        self.store.set_is_loading(True)
        try:
            case = self.api.cases.create_case(
                CreateCaseRequest(title=title.strip(), description=description or None)
            )
        except BACKEND_ERRORS as exc:
            self._report(exc, "Failed to create case")
            return None
        finally:
            self.store.set_is_loading(False)

        self.store.add_case(case)
        self.select_case(case)
        self.store.set_create_case_modal_open(False)

        if selection.files:
            self._upload_selected(case.id, selection.files)
            self.notify("success", f"Case created with {len(selection.files)} documents!")
        else:
            self.notify("success", "Case created successfully")
        return case

    # documents

    def upload_documents(self, files: Iterable[UploadFile], case_id: str | None = None) -> UploadResponse | None:
        """
        Validates, then uploads one batch. Invalid files are dropped with a
        notification each; a batch with no valid file left is rejected.
        Successful files are kept even when others in the batch fail.
        """
        if case_id is None:
            current = self.store.state.current_case
            if current is None:
                self.notify("error", "Please select a case first")
                return None
            case_id = current.id

        selection = select_files(files, self.settings)
        for error in selection.errors:
            self.notify("error", error)
        if not selection.files:
            raise UploadValidationError(selection.errors or ["No files selected"])

        return self._upload_selected(case_id, selection.files)

    def _upload_selected(self, case_id: str, files: list[UploadFile]) -> UploadResponse | None:
        names = [f.name for f in files]
        self.store.start_upload(names)
        try:
            result = self.api.documents.upload_documents(
                case_id, files, on_progress=self.store.set_upload_progress
            )
        except BACKEND_ERRORS as exc:
            self._report(exc, "Failed to upload files")
            self.store.finish_upload(completed=[], failed=names)
            return None

        if not result.success:
            self.store.finish_upload(completed=[], failed=names)
            self.notify("error", result.message or "Document upload failed")
            return result

        self.store.finish_upload(
            completed=[d.get("filename") or "Unknown" for d in result.successful_documents],
            failed=[d.get("filename") or "Unknown" for d in result.failed_documents],
        )
        if result.successful_count > 0:
            self.load_case_details(case_id)
        if result.failed_count > 0:
            self.notify("error", f"{result.failed_count} documents failed to process")
        return result

    def delete_document(self, document_id: str) -> bool:
        current = self.store.state.current_case
        if current is None:
            return False
        try:
            self.api.documents.delete_document(document_id, current.id)
        except BACKEND_ERRORS as exc:
            self.notify("error", _user_message(exc, "Failed to delete document"))
            return False

        self.store.remove_document(document_id)
        self.notify("success", "Document deleted successfully")
        return True

    def view_document(self, document: Document) -> str | None:
        self.store.set_is_loading(True)
        try:
            details = self.api.documents.get_document(document.id)
        except BACKEND_ERRORS as exc:
            self.notify("error", _user_message(exc, "Failed to load document"))
            return None
        finally:
            self.store.set_is_loading(False)
        return details.document.raw_text or "No content available"

    # chat

    def send_message(self, query: str, *, stream: bool = False) -> ChatMessage | None:
        """
        Appends the user's message straight away, then the assistant's once the
        backend answers. Returns the assistant message, or None if nothing was sent
        or the answer failed.
        """
        query = query.strip()
        state = self.store.state
        case = state.current_case
        if not query or case is None or state.is_typing:
            return None

        self.store.add_chat_message(ChatMessage(thread_id=case.id, role="user", content=query))
        self.store.set_is_typing(True)
        self.store.clear_streaming_content()

        if stream:
            return self._send_streaming(case, query)

        try:
            result = self.api.chat.chat_with_case(case.id, query, user_id=self._user_id())
        except BACKEND_ERRORS as exc:
            self._report(exc, "Failed to send message")
            self.store.set_is_typing(False)
            self.store.clear_streaming_content()
            return None

        message = ChatMessage(
            thread_id=case.id,
            role="assistant",
            content=result.response,
            citations=result.citations,
        )
        if result.message_id:
            message = message.model_copy(update={"id": result.message_id})
        self.store.add_chat_message(message)
        self.store.set_is_typing(False)
        return message

    def _send_streaming(self, case: Case, query: str) -> ChatMessage | None:
        citations: list[Citation] = []
        message_ids: list[str] = []
        errors: list[str] = []

        def on_chunk(event: StreamingChatChunk) -> None:
            if event.type == "content" and event.content:
                self.store.append_streaming_content(event.content)
            elif event.type == "status" and event.message:
                logger.debug("Chat status: %s", event.message)
            elif event.type == "complete":
                if event.citations:
                    citations[:] = [c.model_copy(update={"case_id": case.id}) for c in event.citations]
                if event.message_id:
                    message_ids.append(event.message_id)

        self.api.chat.stream_chat(
            ChatRequest(case_id=case.id, query=query, user_id=self._user_id()),
            on_chunk=on_chunk,
            on_error=errors.append,
            on_complete=lambda: None,
        )

        content = self.store.state.streaming_content
        self.store.set_is_typing(False)
        self.store.clear_streaming_content()

        if errors:
            self.store.set_error(errors[0])
            self.notify("error", errors[0])
            return None
        if not content:
            return None

        message = ChatMessage(
            thread_id=case.id,
            role="assistant",
            content=content,
            citations=citations or None,
        )
        if message_ids:
            message = message.model_copy(update={"id": message_ids[-1]})
        self.store.add_chat_message(message)
        return message

    def select_citation(self, citation: Citation | None) -> None:
        self.store.set_selected_citation(citation)
        self.store.set_citation_modal_open(citation is not None)
