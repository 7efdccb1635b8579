import pytest

from legal_rag_client.schemas.cases import Case
from legal_rag_client.schemas.chat import ChatMessage, ChatThread, Citation
from legal_rag_client.schemas.documents import Document
from legal_rag_client.services.store import AppStore


def make_case(case_id: str, title: str = "Case") -> Case:
    return Case(id=case_id, user_id="u-1", title=title)


def busy_store() -> AppStore:
    store = AppStore()
    store.set_cases([make_case("c-1"), make_case("c-2")])
    store.set_current_case(make_case("c-1"))
    store.set_current_thread(ChatThread(id="t-1", case_id="c-1"))
    store.add_chat_message(ChatMessage(role="user", content="What is the limitation period?"))
    store.add_chat_message(ChatMessage(role="assistant", content="Six years."))
    store.set_selected_citation(Citation(chunk_id="k-1", document_name="statute.pdf"))
    store.append_streaming_content("partial")
    store.set_documents([Document(id="d-1", case_id="c-1", filename="statute.pdf")])
    return store


def test_selecting_a_case_resets_chat_state():
    store = busy_store()

    store.set_current_case(make_case("c-2"))

    state = store.state
    assert state.current_case.id == "c-2"
    assert state.chat_messages == ()
    assert state.selected_citation is None
    assert state.streaming_content == ""
    assert state.current_thread is None
    assert state.documents == ()


def test_selecting_the_same_case_still_resets():
    store = busy_store()

    store.set_current_case(make_case("c-1"))

    assert store.state.chat_messages == ()
    assert store.state.selected_citation is None


def test_removing_current_case_clears_selection_and_transcript():
    store = busy_store()

    store.remove_case("c-1")

    state = store.state
    assert [c.id for c in state.cases] == ["c-2"]
    assert state.current_case is None
    assert state.current_thread is None
    assert state.chat_messages == ()


def test_removing_other_case_leaves_selection_alone():
    store = busy_store()
    before = store.state

    store.remove_case("c-2")

    state = store.state
    assert [c.id for c in state.cases] == ["c-1"]
    assert state.current_case is before.current_case
    assert state.current_thread is before.current_thread
    assert state.chat_messages == before.chat_messages


def test_add_case_prepends():
    store = AppStore()
    store.set_cases([make_case("c-1")])

    store.add_case(make_case("c-new"))

    assert [c.id for c in store.state.cases] == ["c-new", "c-1"]


def test_update_case_merges_into_list_and_current():
    store = busy_store()

    store.update_case("c-1", title="Renamed", status="archived")

    assert store.state.cases[0].title == "Renamed"
    assert store.state.current_case.title == "Renamed"
    assert store.state.current_case.status == "archived"
    assert store.state.cases[1].title == "Case"


def test_set_current_thread_resets_transcript():
    store = busy_store()

    store.set_current_thread(ChatThread(id="t-2", case_id="c-1"))

    assert store.state.chat_messages == ()
    assert store.state.selected_citation is None
    assert store.state.current_case.id == "c-1"


def test_streaming_content_accumulates():
    store = AppStore()
    store.append_streaming_content("The ")
    store.append_streaming_content("court held")

    assert store.state.streaming_content == "The court held"
    store.clear_streaming_content()
    assert store.state.streaming_content == ""


def test_subscribers_see_every_snapshot_until_unsubscribed():
    store = AppStore()
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append(s.sidebar_open))

    store.toggle_sidebar()
    store.toggle_sidebar()
    unsubscribe()
    store.toggle_sidebar()

    assert seen == [False, True]


def test_snapshots_are_immutable():
    store = AppStore()
    first = store.state
    store.set_error("boom")

    assert first.error is None
    assert store.state.error == "boom"
    with pytest.raises(AttributeError):
        store.state.error = "other"


def test_upload_batch_lifecycle():
    store = AppStore()

    store.start_upload(["a.pdf", "b.pdf"])
    assert store.state.upload_batch.processing == ("a.pdf", "b.pdf")
    assert store.state.upload_batch.progress == 1
    assert store.state.upload_panel_open

    store.set_upload_progress(45)
    store.set_upload_progress(140)
    assert store.state.upload_batch.progress == 100

    store.finish_upload(completed=["a.pdf"], failed=["b.pdf"])
    batch = store.state.upload_batch
    assert batch.is_resolved
    assert batch.completed == ("a.pdf",)
    assert batch.failed == ("b.pdf",)

    store.dismiss_upload()
    assert store.state.upload_batch is None
    assert not store.state.upload_panel_open


def test_dismissing_unresolved_batch_only_hides_panel():
    store = AppStore()
    store.start_upload(["a.pdf"])

    store.dismiss_upload()

    assert store.state.upload_batch is not None
    assert not store.state.upload_panel_open


def test_progress_without_batch_is_ignored():
    store = AppStore()
    store.set_upload_progress(50)
    assert store.state.upload_batch is None


def test_reset_keeps_theme_only():
    store = busy_store()
    store.set_theme("dark")

    store.reset()

    assert store.state.theme == "dark"
    assert store.state.cases == ()
    assert store.state.current_case is None


def test_unknown_theme_rejected():
    with pytest.raises(ValueError):
        AppStore().set_theme("sepia")
