"""Request bodies and response shaping for the hosting API."""

from pydantic import BaseModel, Field

from gallery_sync.domain.imports import (
    AwaitingUserCompletion,
    Done,
    Failed,
    ImportState,
    Processing,
    ProgressPolling,
)
from gallery_sync.domain.photos import PhotoSource


class LoginRequest(BaseModel):
    """Body carrying a new backend bearer token."""

    token: str = Field(min_length=1)


class SourceRequest(BaseModel):
    """Body for switching the active gallery source."""

    source: PhotoSource


class TestConnectionRequest(BaseModel):
    """Body for a Synology login test."""

    otp_code: str = ""


class SettingsUpdateRequest(BaseModel):
    """Body for updating backend settings."""

    settings: dict[str, str] = Field(default_factory=dict)


def describe_import_state(state: ImportState) -> dict[str, object]:
    """Flatten an import state into JSON for the UI."""
    data: dict[str, object] = {"state": type(state).__name__}
    if isinstance(state, AwaitingUserCompletion):
        data["session_id"] = state.session.id
        data["interaction_uri"] = state.session.interaction_uri
    elif isinstance(state, Processing):
        data["session_id"] = state.session.id
    elif isinstance(state, ProgressPolling):
        data["session_id"] = state.session.id
        data["processed"] = state.processed
    elif isinstance(state, Done):
        data["count"] = state.count
        data["message"] = state.message
    elif isinstance(state, Failed):
        data["message"] = state.message
    return data
