"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import httpx
import pytest

from gallery_sync.adapters.gallery_client import GalleryClient
from gallery_sync.adapters.interaction_surface import InteractionSurface
from gallery_sync.adapters.picker_client import PickerClient
from gallery_sync.adapters.settings_client import SettingsClient
from gallery_sync.adapters.synology_client import SynologyClient
from gallery_sync.adapters.transport import TokenStore
from gallery_sync.config import Settings
from gallery_sync.containers import AppContainer
from gallery_sync.services.gallery import PhotoCollection
from gallery_sync.services.imports import ImportSessionController
from gallery_sync.services.messages import StatusMessage
from gallery_sync.services.settings import SettingsService
from gallery_sync.services.synology import SynologyService

GOOGLE_CREDENTIALS = {
    "google_client_id": "client-id",
    "google_client_secret": "client-secret",
}


def http_error(
    status_code: int, path: str, payload: dict[str, object] | None = None
) -> httpx.HTTPStatusError:
    """Build the error ``raise_for_status`` would raise for a response."""
    request = httpx.Request("GET", f"http://backend.test/api{path}")
    response = httpx.Response(status_code, request=request, json=payload or {})
    return httpx.HTTPStatusError(
        f"HTTP {status_code}", request=request, response=response
    )


@dataclass
class FakeGalleryClient(GalleryClient):
    """In-memory gallery backend keyed by source."""

    photos: dict[str, list[int]] = field(default_factory=dict)
    list_calls: list[tuple[str, int, int]] = field(default_factory=list)
    deleted: list[int] = field(default_factory=list)
    fail_list: bool = False
    fail_delete: bool = False
    gates: dict[str, asyncio.Event] = field(default_factory=dict)

    async def list_photos(
        self, source: str, limit: int, offset: int
    ) -> dict[str, object]:
        self.list_calls.append((source, limit, offset))
        gate = self.gates.get(source)
        if gate is not None:
            await gate.wait()
        if self.fail_list:
            raise http_error(500, "/gallery/photos")
        ids = self.photos.get(source, [])
        page = ids[offset : offset + limit]
        return {
            "photos": [{"id": photo_id, "source": source} for photo_id in page] or None,
            "total": len(ids),
        }

    async def delete_photo(self, photo_id: int) -> dict[str, object]:
        if self.fail_delete:
            raise http_error(500, f"/gallery/photos/{photo_id}")
        self.deleted.append(photo_id)
        for ids in self.photos.values():
            if photo_id in ids:
                ids.remove(photo_id)
        return {"status": "deleted"}

    async def delete_photos(self, source: str) -> dict[str, object]:
        if self.fail_delete:
            raise http_error(500, "/gallery/photos")
        count = len(self.photos.get(source, []))
        self.photos[source] = []
        return {"status": "deleted", "message": f"Deleted {count} photos"}


@dataclass
class FakePickerClient(PickerClient):
    """Scripted picker backend that records every call."""

    session: dict[str, object] = field(
        default_factory=lambda: {"id": "s1", "pickerUri": "https://picker.test/s1"}
    )
    completions: list[bool] = field(default_factory=lambda: [True])
    process_result: dict[str, object] | None = field(
        default_factory=lambda: {"count": 1}
    )
    progress: list[dict[str, object]] = field(default_factory=list)
    create_error: Exception | None = None
    poll_error: Exception | None = None
    process_error: Exception | None = None
    calls: list[tuple[str, str | None]] = field(default_factory=list)

    async def create_session(self) -> dict[str, object]:
        self.calls.append(("create", None))
        if self.create_error is not None:
            raise self.create_error
        return self.session

    async def poll_session(self, session_id: str) -> dict[str, object]:
        self.calls.append(("poll", session_id))
        if self.poll_error is not None:
            raise self.poll_error
        if len(self.completions) > 1:
            return {"complete": self.completions.pop(0)}
        return {"complete": self.completions[0]}

    async def process_session(self, session_id: str) -> dict[str, object] | None:
        self.calls.append(("process", session_id))
        if self.process_error is not None:
            raise self.process_error
        return self.process_result

    async def get_progress(self, session_id: str) -> dict[str, object]:
        self.calls.append(("progress", session_id))
        if len(self.progress) > 1:
            return self.progress.pop(0)
        return self.progress[0]

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)


@dataclass
class FakeSettingsClient(SettingsClient):
    """In-memory settings store."""

    values: dict[str, str] = field(default_factory=dict)
    reads: int = 0
    fail_get: bool = False

    async def get_settings(self) -> dict[str, str]:
        self.reads += 1
        if self.fail_get:
            raise http_error(500, "/settings")
        return dict(self.values)

    async def update_settings(self, values: dict[str, str]) -> None:
        self.values.update(values)


@dataclass
class FakeSynologyClient(SynologyClient):
    """Scripted Synology backend."""

    count: int = 0
    albums: list[dict[str, object]] = field(default_factory=list)
    errors: dict[str, Exception] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    otp_codes: list[str] = field(default_factory=list)

    def _call(self, name: str) -> None:
        self.calls.append(name)
        error = self.errors.get(name)
        if error is not None:
            raise error

    async def get_count(self) -> dict[str, object]:
        self._call("count")
        return {"count": self.count}

    async def list_albums(self) -> list[dict[str, object]]:
        self._call("albums")
        return self.albums

    async def test_connection(self, otp_code: str) -> dict[str, object]:
        self.otp_codes.append(otp_code)
        self._call("test")
        return {"status": "ok"}

    async def sync(self) -> None:
        self._call("sync")

    async def logout(self) -> None:
        self._call("logout")

    async def clear(self) -> None:
        self._call("clear")
        self.count = 0


@dataclass
class RecordingSurface(InteractionSurface):
    """Interaction surface that only records what it was asked to open."""

    opened: list[str] = field(default_factory=list)

    def open(self, uri: str) -> None:
        self.opened.append(uri)


def make_controller(
    picker: FakePickerClient,
    gallery: FakeGalleryClient | None = None,
    settings_values: dict[str, str] | None = None,
    max_completion_polls: int | None = None,
) -> ImportSessionController:
    """Build an import controller with zero-delay polling."""
    message = StatusMessage()
    settings_service = SettingsService(
        FakeSettingsClient(),
        values=dict(GOOGLE_CREDENTIALS if settings_values is None else settings_values),
    )
    collection = PhotoCollection(
        client=gallery or FakeGalleryClient(), message=message, limit=10
    )
    return ImportSessionController(
        picker_client=picker,
        settings_service=settings_service,
        collection=collection,
        message=message,
        surface=RecordingSurface(),
        poll_interval_seconds=0,
        max_completion_polls=max_completion_polls,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        backend_base_url="http://backend.test/api",
        api_token="test-token",
        poll_interval_seconds=0.01,
        _env_file=None,
    )


@pytest.fixture
def gallery_client() -> FakeGalleryClient:
    return FakeGalleryClient(photos={"google_photos": list(range(1, 26))})


@pytest.fixture
def picker_client() -> FakePickerClient:
    return FakePickerClient()


@pytest.fixture
def synology_client() -> FakeSynologyClient:
    return FakeSynologyClient(count=3)


@pytest.fixture
def container(
    settings: Settings,
    gallery_client: FakeGalleryClient,
    picker_client: FakePickerClient,
    synology_client: FakeSynologyClient,
) -> AppContainer:
    status_message = StatusMessage()
    settings_service = SettingsService(
        FakeSettingsClient(values=dict(GOOGLE_CREDENTIALS))
    )
    collection = PhotoCollection(
        client=gallery_client, message=status_message, limit=settings.page_limit
    )
    import_controller = ImportSessionController(
        picker_client=picker_client,
        settings_service=settings_service,
        collection=collection,
        message=status_message,
        surface=RecordingSurface(),
        poll_interval_seconds=settings.poll_interval_seconds,
    )
    synology_service = SynologyService(
        client=synology_client, settings_service=settings_service
    )

    async def close_resources() -> None:
        await import_controller.close()

    return AppContainer(
        settings=settings,
        token_store=TokenStore(settings.api_token),
        status_message=status_message,
        settings_service=settings_service,
        collection=collection,
        import_controller=import_controller,
        synology_service=synology_service,
        close_resources=close_resources,
    )
