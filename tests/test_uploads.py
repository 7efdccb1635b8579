import pytest

from legal_rag_client.core.errors import UploadValidationError
from legal_rag_client.schemas.documents import UploadFile
from legal_rag_client.services.uploads import SimulatedProgress, UploadBatch, select_files, validate_file

ONE_MB = 1024 * 1024


def pdf(name: str, size: int = 10) -> UploadFile:
    return UploadFile(name=name, content=b"x" * size, content_type="application/pdf")


def test_file_exactly_at_limit_is_accepted(settings):
    assert validate_file(pdf("exact.pdf", ONE_MB), settings) is None


def test_file_one_byte_over_limit_is_rejected(settings):
    message = validate_file(pdf("huge.pdf", ONE_MB + 1), settings)

    assert message == 'File "huge.pdf" is too large. Maximum size is 1MB (1 MB).'


def test_unsupported_extension_is_rejected(settings):
    message = validate_file(UploadFile(name="evidence.exe", content=b"MZ"), settings)

    assert message == 'File "evidence.exe" has an unsupported format. Accepted formats: .pdf,.doc,.docx,.txt'


def test_extension_check_is_case_insensitive(settings):
    assert validate_file(UploadFile(name="NOTES.TXT", content=b"hi"), settings) is None


def test_select_files_splits_valid_and_invalid(settings):
    selection = select_files([pdf("a.pdf"), pdf("big.pdf", ONE_MB + 1), UploadFile(name="x.png", content=b"")], settings)

    assert [f.name for f in selection.files] == ["a.pdf"]
    assert len(selection.errors) == 2
    assert 'File "big.pdf"' in selection.errors[0]


def test_too_many_files_rejects_whole_selection(settings):
    with pytest.raises(UploadValidationError) as exc_info:
        select_files([pdf(f"{i}.pdf") for i in range(4)], settings)

    assert exc_info.value.errors == [
        "Cannot select more than 3 files at once. You currently have 0 files selected."
    ]


def test_limit_counts_files_already_selected(settings):
    with pytest.raises(UploadValidationError) as exc_info:
        select_files([pdf("a.pdf"), pdf("b.pdf")], settings, already_selected=2)

    assert "You currently have 2 files selected." in exc_info.value.errors[0]


def test_batch_resolution_keeps_lists_disjoint():
    batch = UploadBatch.start(["a.pdf", "b.pdf"]).with_progress(60)

    resolved = batch.resolve(completed=["a.pdf"], failed=["a.pdf", "b.pdf"])

    assert resolved.processing == ()
    assert resolved.completed == ("a.pdf",)
    assert resolved.failed == ("b.pdf",)
    assert resolved.progress == 60


class FakeTimer:
    created: list["FakeTimer"] = []

    def __init__(self, delay, fn, args=()):
        self.delay = delay
        self.fn = fn
        self.args = args
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.fn(*self.args)


@pytest.fixture(autouse=True)
def _reset_timers():
    FakeTimer.created = []


def test_simulated_progress_schedules_milestones_and_stops_on_finish():
    seen = []
    progress = SimulatedProgress(seen.append, timer_factory=FakeTimer)

    progress.start()
    assert [t.delay for t in FakeTimer.created] == [0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9]
    assert all(t.started and t.daemon for t in FakeTimer.created)

    FakeTimer.created[0].fire()
    FakeTimer.created[1].fire()
    progress.finish(100)
    # a timer that was already running when finish() cancelled it
    FakeTimer.created[2].fire()

    assert seen == [5, 15, 100]
    assert all(t.cancelled for t in FakeTimer.created)


def test_simulated_progress_reports_zero_on_failure():
    seen = []
    progress = SimulatedProgress(seen.append, timer_factory=FakeTimer)
    progress.start()

    progress.finish(0)

    assert seen == [0]
