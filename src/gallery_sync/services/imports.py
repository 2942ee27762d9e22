"""Picker import flow: create session, wait for the user, process, track progress."""

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass, field

from gallery_sync.adapters.interaction_surface import (
    HandoffInteractionSurface,
    InteractionSurface,
)
from gallery_sync.adapters.picker_client import PickerClient
from gallery_sync.domain.errors import PickerTimeoutError
from gallery_sync.domain.imports import (
    TERMINAL_STATES,
    AwaitingUserCompletion,
    CompletionObserved,
    Done,
    Failed,
    Idle,
    ImportCancelled,
    ImportEvent,
    ImportSession,
    ImportState,
    PreconditionFailed,
    Processing,
    ProcessingAccepted,
    ProcessingCompleted,
    ProgressPolling,
    ProgressReported,
    ProgressState,
    ProgressStatus,
    SessionCreated,
    SessionCreating,
    SessionRequested,
    StepFailed,
    success_message,
)
from gallery_sync.domain.photos import PhotoSource
from gallery_sync.domain.polling import PollContinue, PollDone, PollError, PollOutcome
from gallery_sync.services.gallery import PhotoCollection
from gallery_sync.services.messages import StatusMessage
from gallery_sync.services.poller import PollHandle, SessionPoller
from gallery_sync.services.settings import GOOGLE_CREDENTIAL_FIELDS, SettingsService

_logger = logging.getLogger(__name__)

MISSING_CREDENTIALS_MESSAGE = (
    "Please configure Google Photos Credentials in Settings first."
)
SYNOLOGY_IMPORT_MESSAGE = "Use the Sync button in Synology settings to add photos."
START_FAILED_MESSAGE = "Failed to start picker flow"
POLL_FAILED_MESSAGE = "Failed to check picker status"
PICKER_TIMEOUT_MESSAGE = "Picker session timed out. Start the import again."
PROCESS_FAILED_MESSAGE = "Error processing photos"


def advance(state: ImportState, event: ImportEvent) -> ImportState:  # noqa: PLR0911
    """Return the state that follows ``state`` after ``event``.

    Events that do not apply to the current state, including results tagged
    with another session's id, leave the state unchanged.
    """
    if isinstance(event, PreconditionFailed):
        return Failed(event.message)
    if isinstance(event, SessionRequested):
        return SessionCreating()
    if isinstance(event, ImportCancelled):
        return Idle()

    if isinstance(state, SessionCreating):
        if isinstance(event, SessionCreated):
            return AwaitingUserCompletion(event.session)
        if isinstance(event, StepFailed) and event.session_id is None:
            return Failed(event.message)
        return state

    session = getattr(state, "session", None)
    if session is None or getattr(event, "session_id", None) != session.id:
        return state

    if isinstance(event, StepFailed):
        return Failed(event.message)
    if isinstance(state, AwaitingUserCompletion) and isinstance(
        event, CompletionObserved
    ):
        return Processing(session)
    if isinstance(state, Processing):
        if isinstance(event, ProcessingCompleted):
            return Done(event.count, success_message(event.count))
        if isinstance(event, ProcessingAccepted):
            return ProgressPolling(session)
    if isinstance(state, ProgressPolling) and isinstance(event, ProgressReported):
        progress = event.progress
        if progress.status == ProgressStatus.DONE:
            return Done(progress.processed, success_message(progress.processed))
        if progress.status == ProgressStatus.ERROR:
            return Failed(f"Error: {progress.error}")
        return ProgressPolling(session, processed=progress.processed)
    return state


@dataclass
class ImportSessionController:
    """Drives one picker import at a time and mirrors it into the collection."""

    picker_client: PickerClient
    settings_service: SettingsService
    collection: PhotoCollection
    message: StatusMessage
    surface: InteractionSurface = field(default_factory=HandoffInteractionSurface)
    poll_interval_seconds: float = 2.0
    message_ttl_seconds: float = 5.0
    max_completion_polls: int | None = None
    state: ImportState = field(default_factory=Idle)
    completion_poller: SessionPoller = field(
        default_factory=lambda: SessionPoller("picker-completion")
    )
    progress_poller: SessionPoller = field(
        default_factory=lambda: SessionPoller("picker-progress")
    )
    completion_handle: PollHandle | None = None
    progress_handle: PollHandle | None = None
    _finished: asyncio.Event = field(default_factory=asyncio.Event, repr=False)
    _tasks: set[asyncio.Task[None]] = field(default_factory=set, repr=False)
    _attempt: int = field(default=0, repr=False)

    @property
    def busy(self) -> bool:
        """Return True while an attempt has not reached a terminal state."""
        return not isinstance(self.state, TERMINAL_STATES)

    async def start_import(self) -> ImportState:
        """Begin a fresh import attempt, discarding any previous one."""
        self._attempt += 1
        attempt = self._attempt
        self._stop_polling()
        self._cancel_tasks()
        self._finished.clear()

        if self.collection.source == PhotoSource.SYNOLOGY_PHOTOS:
            self._fail_precondition(SYNOLOGY_IMPORT_MESSAGE)
            return self.state
        if self.settings_service.missing_fields(GOOGLE_CREDENTIAL_FIELDS):
            self._fail_precondition(MISSING_CREDENTIALS_MESSAGE)
            return self.state

        self._apply(SessionRequested())
        try:
            payload = await self.picker_client.create_session()
            session = ImportSession.model_validate(payload)
        except Exception:
            if attempt != self._attempt:
                _logger.info("Ignoring session failure from a superseded attempt")
                return self.state
            _logger.exception("Failed to create picker session")
            self._apply(StepFailed(START_FAILED_MESSAGE))
            return self.state

        if attempt != self._attempt or not self._apply(SessionCreated(session)):
            _logger.info(
                "Discarding picker session %s from a superseded attempt", session.id
            )
            return self.state
        self.surface.open(session.interaction_uri)
        self._poll_completion(session)
        return self.state

    def cancel(self) -> ImportState:
        """Abandon the current attempt and stop all polling."""
        self._attempt += 1
        self._stop_polling()
        self._cancel_tasks()
        self._apply(ImportCancelled())
        return self.state

    async def wait_finished(self) -> ImportState:
        """Wait until the current attempt reaches a terminal state."""
        if self.busy:
            await self._finished.wait()
        return self.state

    async def close(self) -> None:
        """Stop timers and pending follow-up work; call on teardown."""
        self._stop_polling()
        await self.completion_poller.aclose()
        await self.progress_poller.aclose()
        tasks = self._cancel_tasks()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _poll_completion(self, session: ImportSession) -> None:
        polls = 0

        async def probe() -> PollOutcome:
            nonlocal polls
            polls += 1
            payload = await self.picker_client.poll_session(session.id)
            if payload.get("complete"):
                return PollDone(session)
            limit = self.max_completion_polls
            if limit is not None and polls >= limit:
                return PollError(PickerTimeoutError(session.id))
            return PollContinue()

        def on_complete(outcome: PollDone | PollError) -> None:
            if isinstance(outcome, PollError):
                message = (
                    PICKER_TIMEOUT_MESSAGE
                    if isinstance(outcome.error, PickerTimeoutError)
                    else POLL_FAILED_MESSAGE
                )
                _logger.warning(
                    "Picker session %s failed: %s", session.id, outcome.error
                )
                self._apply(StepFailed(message, session.id))
                return
            if self._apply(CompletionObserved(session.id)):
                self._spawn(self._process(session))

        self.completion_handle = self.completion_poller.start(
            self.poll_interval_seconds, probe, on_complete
        )

    async def _process(self, session: ImportSession) -> None:
        try:
            payload = await self.picker_client.process_session(session.id)
        except Exception:
            _logger.exception("Failed to process picker session %s", session.id)
            self._apply(StepFailed(PROCESS_FAILED_MESSAGE, session.id))
            return
        if payload is None:
            if self._apply(ProcessingAccepted(session.id)):
                self._poll_progress(session)
            return
        count = int(payload.get("count") or 0)
        await self.collection.fetch()
        self._apply(ProcessingCompleted(session.id, count))

    def _poll_progress(self, session: ImportSession) -> None:
        async def probe() -> PollOutcome:
            try:
                payload = await self.picker_client.get_progress(session.id)
                progress = ProgressState.model_validate(payload)
            except Exception:
                _logger.warning(
                    "Progress poll for %s failed", session.id, exc_info=True
                )
                return PollContinue()
            if progress.status == ProgressStatus.ERROR:
                return PollDone(progress)
            await self.collection.fetch()
            if progress.status == ProgressStatus.RUNNING:
                self._apply(ProgressReported(session.id, progress))
                return PollContinue()
            return PollDone(progress)

        def on_complete(outcome: PollDone | PollError) -> None:
            if isinstance(outcome, PollError):
                self._apply(StepFailed(PROCESS_FAILED_MESSAGE, session.id))
                return
            self._apply(ProgressReported(session.id, outcome.result))

        self.progress_handle = self.progress_poller.start(
            self.poll_interval_seconds, probe, on_complete
        )

    def _fail_precondition(self, text: str) -> None:
        self._apply(PreconditionFailed(text))

    def _apply(self, event: ImportEvent) -> bool:
        """Advance the state; returns False when the event was ignored."""
        previous = self.state
        self.state = advance(previous, event)
        if self.state is previous:
            _logger.debug(
                "Ignored %s in %s", type(event).__name__, type(previous).__name__
            )
            return False
        _logger.info(
            "Import %s -> %s", type(previous).__name__, type(self.state).__name__
        )
        self._publish(self.state, precondition=isinstance(event, PreconditionFailed))
        return True

    def _publish(self, state: ImportState, *, precondition: bool) -> None:
        if isinstance(state, Done):
            self.message.show(state.message, ttl_seconds=self.message_ttl_seconds)
        elif isinstance(state, Failed):
            ttl = self.message_ttl_seconds if precondition else None
            self.message.show(state.message, ttl_seconds=ttl)
        elif isinstance(state, SessionCreating):
            self.message.clear()
        if isinstance(state, TERMINAL_STATES):
            self._stop_polling()
            self._finished.set()

    def _stop_polling(self) -> None:
        self.completion_poller.stop()
        self.progress_poller.stop()
        self.completion_handle = None
        self.progress_handle = None

    def _spawn(self, coro: Coroutine[object, object, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _cancel_tasks(self) -> list[asyncio.Task[None]]:
        tasks = [task for task in self._tasks if task is not asyncio.current_task()]
        for task in tasks:
            task.cancel()
        return tasks
