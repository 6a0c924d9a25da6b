"""Pure transition function for the upload workflow.

Phases: idle -> file-selected -> uploading -> succeeded | failed.
``transition`` never performs I/O; it returns the next state together with
the commands the driver has to execute. Events that are not valid in the
current phase leave the state untouched and produce no commands.
"""

from dataclasses import dataclass, replace
from enum import Enum

from clauseradar.client.files import SelectedFile
from clauseradar.logging.logger import Log
from clauseradar.risk.models import DocumentAnalysis, Persona
from clauseradar.session.notices import Notice, NoticeLevel


class UploadPhase(str, Enum):
    IDLE = "idle"
    FILE_SELECTED = "file-selected"
    UPLOADING = "uploading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadPolicy:
    """Synthetic progress and handoff timing.

    ``progress_ceiling`` must stay below 100 so only a service response can
    complete the bar.
    """

    progress_ceiling: float = 90.0
    progress_step_fraction: float = 0.15
    handoff_delay_seconds: float = 2.0

    def __post_init__(self) -> None:
        if not 0 < self.progress_ceiling < 100:
            raise ValueError("progress_ceiling must be between 0 and 100 (exclusive)")
        if not 0 < self.progress_step_fraction <= 1:
            raise ValueError("progress_step_fraction must be in (0, 1]")


@dataclass(frozen=True)
class UploadState:
    phase: UploadPhase = UploadPhase.IDLE
    file: SelectedFile | None = None
    progress: float = 0.0
    error: str | None = None
    analysis: DocumentAnalysis | None = None
    attempt: int = 0
    closed: bool = False


# Events


@dataclass(frozen=True)
class FileSelected:
    file: SelectedFile


@dataclass(frozen=True)
class UploadRequested:
    persona: Persona | None = None


@dataclass(frozen=True)
class ProgressTicked:
    pass


@dataclass(frozen=True)
class UploadSucceeded:
    attempt: int
    analysis: DocumentAnalysis


@dataclass(frozen=True)
class UploadFailed:
    attempt: int
    message: str


@dataclass(frozen=True)
class RetryRequested:
    pass


@dataclass(frozen=True)
class SessionClosed:
    pass


UploadEvent = (
    FileSelected
    | UploadRequested
    | ProgressTicked
    | UploadSucceeded
    | UploadFailed
    | RetryRequested
    | SessionClosed
)


# Commands


@dataclass(frozen=True)
class StartUpload:
    attempt: int
    file: SelectedFile
    persona: Persona | None = None


@dataclass(frozen=True)
class CancelUpload:
    attempt: int


@dataclass(frozen=True)
class StartProgress:
    pass


@dataclass(frozen=True)
class StopProgress:
    pass


@dataclass(frozen=True)
class ScheduleHandoff:
    delay_seconds: float
    attempt: int


@dataclass(frozen=True)
class Notify:
    notice: Notice


UploadCommand = StartUpload | CancelUpload | StartProgress | StopProgress | ScheduleHandoff | Notify


@dataclass(frozen=True)
class Transition:
    state: UploadState
    commands: tuple[UploadCommand, ...] = ()


_SELECTABLE = frozenset(
    {UploadPhase.IDLE, UploadPhase.FILE_SELECTED, UploadPhase.FAILED, UploadPhase.SUCCEEDED}
)


def transition(
    state: UploadState,
    event: UploadEvent,
    policy: UploadPolicy | None = None,
) -> Transition:
    """Apply one event to the upload state."""
    policy = policy or UploadPolicy()
    if state.closed:
        return Transition(state)
    if isinstance(event, SessionClosed):
        return _close(state)
    if isinstance(event, FileSelected):
        return _select_file(state, event)
    if isinstance(event, UploadRequested):
        return _begin_upload(state, event)
    if isinstance(event, ProgressTicked):
        return _tick(state, policy)
    if isinstance(event, UploadSucceeded):
        return _succeed(state, event, policy)
    if isinstance(event, UploadFailed):
        return _fail(state, event)
    if isinstance(event, RetryRequested):
        return _retry(state)
    raise TypeError(f"Unknown upload event: {event!r}")


def _ignored(state: UploadState, event: object) -> Transition:
    Log.debug(f"Ignoring {type(event).__name__} in phase {state.phase.value}", component="upload")
    return Transition(state)


def _select_file(state: UploadState, event: FileSelected) -> Transition:
    if state.phase not in _SELECTABLE:
        return _ignored(state, event)
    return Transition(
        UploadState(
            phase=UploadPhase.FILE_SELECTED,
            file=event.file,
            attempt=state.attempt,
        )
    )


def _begin_upload(state: UploadState, event: UploadRequested) -> Transition:
    if state.phase is not UploadPhase.FILE_SELECTED or state.file is None:
        return _ignored(state, event)
    attempt = state.attempt + 1
    return Transition(
        replace(
            state,
            phase=UploadPhase.UPLOADING,
            progress=0.0,
            error=None,
            analysis=None,
            attempt=attempt,
        ),
        (StartUpload(attempt, state.file, event.persona), StartProgress()),
    )


def _tick(state: UploadState, policy: UploadPolicy) -> Transition:
    if state.phase is not UploadPhase.UPLOADING:
        return Transition(state)
    remaining = policy.progress_ceiling - state.progress
    progress = state.progress + max(0.0, remaining) * policy.progress_step_fraction
    return Transition(replace(state, progress=min(progress, policy.progress_ceiling)))


def _succeed(state: UploadState, event: UploadSucceeded, policy: UploadPolicy) -> Transition:
    if state.phase is not UploadPhase.UPLOADING or event.attempt != state.attempt:
        return _ignored(state, event)
    return Transition(
        replace(state, phase=UploadPhase.SUCCEEDED, progress=100.0, analysis=event.analysis),
        (
            StopProgress(),
            Notify(
                Notice(
                    "Document Uploaded Successfully!",
                    "Your legal document has been analyzed. Redirecting to dashboard...",
                )
            ),
            ScheduleHandoff(policy.handoff_delay_seconds, state.attempt),
        ),
    )


def _fail(state: UploadState, event: UploadFailed) -> Transition:
    if state.phase is not UploadPhase.UPLOADING or event.attempt != state.attempt:
        return _ignored(state, event)
    return Transition(
        replace(state, phase=UploadPhase.FAILED, progress=0.0, error=event.message),
        (
            StopProgress(),
            Notify(
                Notice(
                    "Upload Failed",
                    "There was an error analyzing your document.",
                    NoticeLevel.ERROR,
                )
            ),
        ),
    )


def _retry(state: UploadState) -> Transition:
    if state.phase is not UploadPhase.FAILED:
        return _ignored(state, RetryRequested())
    return Transition(replace(state, phase=UploadPhase.FILE_SELECTED, progress=0.0, error=None))


def _close(state: UploadState) -> Transition:
    commands: tuple[UploadCommand, ...] = ()
    if state.phase is UploadPhase.UPLOADING:
        commands = (CancelUpload(state.attempt), StopProgress())
    return Transition(UploadState(attempt=state.attempt, closed=True), commands)
