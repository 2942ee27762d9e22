"""Domain models for picker import sessions."""

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ImportSession(BaseModel):
    """Backend-held correlation token for one import attempt."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(min_length=1)
    interaction_uri: str = Field(alias="pickerUri")


class ProgressStatus(StrEnum):
    """Status reported by the progress endpoint."""

    RUNNING = "running"
    DONE = "done"
    ERROR = "error"


class ProgressState(BaseModel):
    """Snapshot of asynchronous import processing."""

    status: ProgressStatus
    processed: int = 0
    error: str | None = None


def success_message(count: int) -> str:
    """Return the user-facing message for a finished import."""
    return f"Successfully added {count} photos!"


# States


@dataclass(frozen=True)
class Idle:
    """No import attempt is in flight."""


@dataclass(frozen=True)
class SessionCreating:
    """Waiting for the backend to create a picker session."""


@dataclass(frozen=True)
class AwaitingUserCompletion:
    """The user is picking photos in the external surface."""

    session: ImportSession


@dataclass(frozen=True)
class Processing:
    """The backend has been asked to process the picked items."""

    session: ImportSession


@dataclass(frozen=True)
class ProgressPolling:
    """The backend processes asynchronously; progress is being polled."""

    session: ImportSession
    processed: int = 0


@dataclass(frozen=True)
class Done:
    """The import finished."""

    count: int
    message: str


@dataclass(frozen=True)
class Failed:
    """The import attempt ended with an error."""

    message: str


ImportState = (
    Idle
    | SessionCreating
    | AwaitingUserCompletion
    | Processing
    | ProgressPolling
    | Done
    | Failed
)

TERMINAL_STATES = (Idle, Done, Failed)


# Events


@dataclass(frozen=True)
class PreconditionFailed:
    message: str


@dataclass(frozen=True)
class SessionRequested:
    pass


@dataclass(frozen=True)
class SessionCreated:
    session: ImportSession


@dataclass(frozen=True)
class StepFailed:
    """A transport or backend failure; ``session_id`` is None before creation."""

    message: str
    session_id: str | None = None


@dataclass(frozen=True)
class CompletionObserved:
    session_id: str


@dataclass(frozen=True)
class ProcessingCompleted:
    session_id: str
    count: int


@dataclass(frozen=True)
class ProcessingAccepted:
    session_id: str


@dataclass(frozen=True)
class ProgressReported:
    session_id: str
    progress: ProgressState


@dataclass(frozen=True)
class ImportCancelled:
    pass


ImportEvent = (
    PreconditionFailed
    | SessionRequested
    | SessionCreated
    | StepFailed
    | CompletionObserved
    | ProcessingCompleted
    | ProcessingAccepted
    | ProgressReported
    | ImportCancelled
)
