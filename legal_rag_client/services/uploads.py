"""
Upload batch handling: file validation before anything is sent, the transient
batch record kept in the store, and the timed progress approximation.
"""
import threading
from dataclasses import dataclass, field
from typing import Callable, Iterable

from legal_rag_client.core.config import Settings
from legal_rag_client.core.errors import UploadValidationError
from legal_rag_client.schemas.documents import UploadFile
from legal_rag_client.utils.formatting import format_bytes, get_file_extension

# (seconds after start, percent)
UPLOAD_PROGRESS_MILESTONES: tuple[tuple[float, int], ...] = (
    (0.2, 5), (0.3, 15), (0.4, 30), (0.5, 45),
    (0.6, 60), (0.7, 75), (0.8, 85), (0.9, 95),
)


def validate_file(file: UploadFile, settings: Settings) -> str | None:
    max_size = settings.max_file_size_bytes
    if file.size > max_size:
        return (
            f'File "{file.name}" is too large. '
            f"Maximum size is {settings.MAX_FILE_SIZE_MB}MB ({format_bytes(max_size)})."
        )

    extension = "." + get_file_extension(file.name)
    if extension not in settings.accepted_extensions:
        return (
            f'File "{file.name}" has an unsupported format. '
            f"Accepted formats: {','.join(settings.accepted_extensions)}"
        )

    return None


@dataclass
class FileSelection:
    files: list[UploadFile] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def select_files(
    files: Iterable[UploadFile],
    settings: Settings,
    already_selected: int = 0,
) -> FileSelection:
    """
    Splits candidate files into valid ones and per-file error messages.
    Going over the per-batch limit rejects the whole selection.
    """
    selection = FileSelection()
    for f in files:
        error = validate_file(f, settings)
        if error:
            selection.errors.append(error)
        else:
            selection.files.append(f)

    max_files = settings.MAX_FILES_PER_UPLOAD
    if already_selected + len(selection.files) > max_files:
        raise UploadValidationError([
            f"Cannot select more than {max_files} files at once. "
            f"You currently have {already_selected} files selected."
        ])
    return selection


@dataclass(frozen=True)
class UploadBatch:
    processing: tuple[str, ...] = ()
    completed: tuple[str, ...] = ()
    failed: tuple[str, ...] = ()
    progress: int = 0

    @property
    def is_resolved(self) -> bool:
        return not self.processing

    @classmethod
    def start(cls, names: Iterable[str]) -> "UploadBatch":
        # 1% so a progress bar is visible straight away
        return cls(processing=tuple(names), progress=1)

    def with_progress(self, value: int) -> "UploadBatch":
        return UploadBatch(self.processing, self.completed, self.failed, max(0, min(100, int(value))))

    def resolve(self, completed: Iterable[str], failed: Iterable[str]) -> "UploadBatch":
        done = tuple(completed)
        return UploadBatch(
            processing=(),
            completed=done,
            failed=tuple(name for name in failed if name not in done),
            progress=self.progress,
        )


class SimulatedProgress:
    """
    Reports fixed progress milestones on timers while a request is in flight.
    finish() cancels whatever has not fired yet so progress never goes backwards.
    """

    def __init__(
        self,
        on_progress: Callable[[int], None],
        milestones: tuple[tuple[float, int], ...] = UPLOAD_PROGRESS_MILESTONES,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self._on_progress = on_progress
        self._milestones = milestones
        self._timer_factory = timer_factory
        self._timers: list[threading.Timer] = []
        self._finished = False
        self._lock = threading.Lock()

    def start(self) -> None:
        for delay, value in self._milestones:
            timer = self._timer_factory(delay, self._emit, args=(value,))
            timer.daemon = True
            self._timers.append(timer)
            timer.start()

    def _emit(self, value: int) -> None:
        with self._lock:
            if not self._finished:
                self._on_progress(value)

    def finish(self, value: int) -> None:
        with self._lock:
            self._finished = True
            for timer in self._timers:
                timer.cancel()
            self._on_progress(value)
