import asyncio
from collections.abc import Callable

from clauseradar.client.base import BaseAnalysisClient
from clauseradar.client.exceptions import AnalysisValidationError, describe_failure
from clauseradar.client.files import DEFAULT_MAX_UPLOAD_BYTES, SelectedFile, check_upload_file
from clauseradar.logging.logger import Log
from clauseradar.risk.models import DocumentAnalysis, Persona
from clauseradar.session.context import SessionContext
from clauseradar.session.notices import Notice, NoticeBoard, NoticeLevel
from clauseradar.session.scheduler import Scheduler, TimerHandle
from clauseradar.session.upload_machine import (
    CancelUpload,
    FileSelected,
    Notify,
    ProgressTicked,
    RetryRequested,
    ScheduleHandoff,
    SessionClosed,
    StartProgress,
    StartUpload,
    StopProgress,
    UploadCommand,
    UploadEvent,
    UploadFailed,
    UploadPhase,
    UploadPolicy,
    UploadRequested,
    UploadState,
    UploadSucceeded,
    transition,
)


class UploadSession:
    """Drives one document from file selection to a completed analysis.

    State changes go through ``upload_machine.transition``; this class only
    executes the resulting commands (upload task, progress timer, handoff
    timer, notices).
    """

    def __init__(
        self,
        client: BaseAnalysisClient,
        scheduler: Scheduler,
        *,
        context: SessionContext | None = None,
        notices: NoticeBoard | None = None,
        policy: UploadPolicy | None = None,
        progress_interval_seconds: float = 0.2,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        on_ready: Callable[[DocumentAnalysis], None] | None = None,
    ) -> None:
        self._client = client
        self._scheduler = scheduler
        self._context = context if context is not None else SessionContext()
        self._notices = notices if notices is not None else NoticeBoard()
        self._policy = policy or UploadPolicy()
        self._progress_interval = progress_interval_seconds
        self._max_upload_bytes = max_upload_bytes
        self._on_ready = on_ready
        self._state = UploadState()
        self._task: asyncio.Task[None] | None = None
        self._progress_timer: TimerHandle | None = None
        self._handoff_timer: TimerHandle | None = None

    @property
    def state(self) -> UploadState:
        return self._state

    @property
    def notices(self) -> NoticeBoard:
        return self._notices

    @property
    def task(self) -> asyncio.Task[None] | None:
        """The in-flight upload task, if any."""
        return self._task

    def select_file(self, file: SelectedFile) -> UploadState:
        """Select (or replace) the file to analyze.

        Raises:
            AnalysisValidationError: if the file is rejected; state is unchanged.
        """
        try:
            check_upload_file(file, self._max_upload_bytes)
        except AnalysisValidationError as exc:
            self._notices.post(Notice("File Rejected", str(exc), NoticeLevel.ERROR))
            raise
        self._dispatch(FileSelected(file))
        if self._state.file is file:
            self._context.close_document()
        return self._state

    def begin_upload(self, persona: Persona | None = None) -> asyncio.Task[None] | None:
        """Start uploading the selected file. Must be called inside a running loop.

        Returns the upload task, or None when no upload could start.
        """
        self._dispatch(UploadRequested(persona))
        if self._state.phase is not UploadPhase.UPLOADING:
            return None
        return self._task

    def retry(self) -> UploadState:
        """Return from ``failed`` to ``file-selected`` keeping the same file."""
        self._dispatch(RetryRequested())
        return self._state

    def close(self) -> None:
        """Tear the session down; late results are discarded."""
        self._dispatch(SessionClosed())
        self._cancel_timer(self._handoff_timer)
        self._handoff_timer = None

    def _dispatch(self, event: UploadEvent) -> None:
        result = transition(self._state, event, self._policy)
        if result.state.phase is not self._state.phase:
            Log.debug(
                f"Upload {self._state.phase.value} -> {result.state.phase.value}",
                component="upload",
            )
        self._state = result.state
        for command in result.commands:
            self._execute(command)

    def _execute(self, command: UploadCommand) -> None:
        if isinstance(command, StartUpload):
            self._task = asyncio.get_running_loop().create_task(self._run_upload(command))
        elif isinstance(command, CancelUpload):
            if self._task is not None and not self._task.done():
                Log.info(f"Cancelling upload attempt {command.attempt}", component="upload")
                self._task.cancel()
        elif isinstance(command, StartProgress):
            self._schedule_progress()
        elif isinstance(command, StopProgress):
            self._cancel_timer(self._progress_timer)
            self._progress_timer = None
        elif isinstance(command, ScheduleHandoff):
            self._handoff_timer = self._scheduler.call_later(
                command.delay_seconds, lambda: self._handoff(command.attempt)
            )
        elif isinstance(command, Notify):
            self._notices.post(command.notice)

    async def _run_upload(self, command: StartUpload) -> None:
        Log.info(
            f"Upload attempt {command.attempt} started for '{command.file.name}'",
            component="upload",
        )
        try:
            analysis = await self._client.upload(command.file, command.persona)
        except asyncio.CancelledError:
            Log.info(f"Upload attempt {command.attempt} cancelled", component="upload")
            raise
        except Exception as exc:
            Log.error(f"Upload attempt {command.attempt} failed: {exc!r}", component="upload")
            self._dispatch(UploadFailed(command.attempt, describe_failure(exc)))
            return
        self._dispatch(UploadSucceeded(command.attempt, analysis))

    def _schedule_progress(self) -> None:
        self._progress_timer = self._scheduler.call_later(
            self._progress_interval, self._on_progress_tick
        )

    def _on_progress_tick(self) -> None:
        self._progress_timer = None
        if self._state.phase is not UploadPhase.UPLOADING:
            return
        self._dispatch(ProgressTicked())
        self._schedule_progress()

    def _handoff(self, attempt: int) -> None:
        self._handoff_timer = None
        state = self._state
        if state.closed or state.phase is not UploadPhase.SUCCEEDED or state.attempt != attempt:
            return
        if state.analysis is None:
            return
        self._context.open_document(state.analysis.id)
        Log.info(f"Document {state.analysis.id} ready for dashboard", component="upload")
        if self._on_ready is not None:
            self._on_ready(state.analysis)

    @staticmethod
    def _cancel_timer(timer: TimerHandle | None) -> None:
        if timer is not None:
            timer.cancel()
