"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gallery_sync.api.models import (
    LoginRequest,
    SettingsUpdateRequest,
    SourceRequest,
    TestConnectionRequest,
    describe_import_state,
)
from gallery_sync.app_logging import configure_logging
from gallery_sync.containers import AppContainer
from gallery_sync.domain.errors import SecondFactorRequiredError, SessionExpiredError
from gallery_sync.domain.results import Err, Result


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        await state_container.settings_service.refresh()
        await state_container.collection.fetch()
        yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(SecondFactorRequiredError)
    async def second_factor_required(
        request: Request, exc: SecondFactorRequiredError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=401, content={"error": "otp_required", "detail": str(exc)}
        )

    @app.exception_handler(SessionExpiredError)
    async def session_expired(
        request: Request, exc: SessionExpiredError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=401, content={"error": "session_expired", "detail": str(exc)}
        )

    @app.exception_handler(httpx.HTTPError)
    async def backend_failed(request: Request, exc: httpx.HTTPError) -> JSONResponse:
        logger.warning("Backend call failed for %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=502, content={"error": "backend_error", "detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/login")
    async def login(body: LoginRequest, request: Request) -> dict[str, str]:
        """Store a new backend token and reload the cached views."""
        state_container: AppContainer = request.app.state.container
        state_container.token_store.set(body.token)
        state_container.status_message.clear()
        await state_container.settings_service.refresh()
        await state_container.collection.fetch()
        return {"status": "ok"}

    @app.get("/gallery")
    async def gallery(request: Request) -> dict[str, object]:
        """Return the current page of the active source."""
        return _gallery_snapshot(request.app.state.container)

    @app.put("/gallery/source")
    async def set_source(body: SourceRequest, request: Request) -> dict[str, object]:
        """Switch the active source and load its first page."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.collection.set_source(body.source)
        return _gallery_snapshot(state_container, result)

    @app.post("/gallery/next")
    async def next_page(request: Request) -> dict[str, object]:
        """Move to the next page, if any."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.collection.next_page()
        return _gallery_snapshot(state_container, result)

    @app.post("/gallery/previous")
    async def previous_page(request: Request) -> dict[str, object]:
        """Move to the previous page, if any."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.collection.previous_page()
        return _gallery_snapshot(state_container, result)

    @app.delete("/gallery/photos/{photo_id}")
    async def delete_photo(photo_id: int, request: Request) -> dict[str, object]:
        """Delete one photo and reload the page."""
        state_container: AppContainer = request.app.state.container
        await state_container.collection.delete_one(photo_id)
        return _gallery_snapshot(state_container)

    @app.delete("/gallery/photos")
    async def delete_photos(request: Request) -> dict[str, object]:
        """Delete every photo of the active source."""
        state_container: AppContainer = request.app.state.container
        await state_container.collection.delete_all()
        return _gallery_snapshot(state_container)

    @app.post("/imports")
    async def start_import(request: Request) -> dict[str, object]:
        """Start a picker import for the active source."""
        state_container: AppContainer = request.app.state.container
        state = await state_container.import_controller.start_import()
        return describe_import_state(state)

    @app.get("/imports/current")
    async def current_import(request: Request) -> dict[str, object]:
        """Return the state of the current import attempt."""
        state_container: AppContainer = request.app.state.container
        data = describe_import_state(state_container.import_controller.state)
        data["message"] = data.get("message") or state_container.status_message.text
        return data

    @app.post("/imports/cancel")
    async def cancel_import(request: Request) -> dict[str, object]:
        """Abandon the current import attempt."""
        state_container: AppContainer = request.app.state.container
        return describe_import_state(state_container.import_controller.cancel())

    @app.get("/synology/count")
    async def synology_count(request: Request) -> dict[str, object]:
        """Return the synced Synology photo count."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.synology_service.fetch_count()
        return {
            "count": state_container.synology_service.count,
            "stale": isinstance(result, Err),
        }

    @app.get("/synology/albums")
    async def synology_albums(request: Request) -> dict[str, object]:
        """Return Synology albums."""
        state_container: AppContainer = request.app.state.container
        service = state_container.synology_service
        await service.fetch_albums()
        return {
            "albums": [album.model_dump() for album in service.albums],
            "error": service.error,
        }

    @app.post("/synology/test")
    async def synology_test(
        body: TestConnectionRequest, request: Request
    ) -> dict[str, object]:
        """Test the Synology login, with an optional one-time code."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.synology_service.test_connection(body.otp_code)
        return {"result": result, "count": state_container.synology_service.count}

    @app.post("/synology/sync")
    async def synology_sync(request: Request) -> dict[str, object]:
        """Sync Synology photos."""
        state_container: AppContainer = request.app.state.container
        count = await state_container.synology_service.sync()
        return {"status": "synced", "count": count}

    @app.post("/synology/clear")
    async def synology_clear(request: Request) -> dict[str, object]:
        """Remove synced Synology photos."""
        state_container: AppContainer = request.app.state.container
        await state_container.synology_service.clear()
        return {"status": "cleared", "count": state_container.synology_service.count}

    @app.post("/synology/logout")
    async def synology_logout(request: Request) -> dict[str, str]:
        """Log out of Synology."""
        state_container: AppContainer = request.app.state.container
        await state_container.synology_service.logout()
        return {"status": "ok"}

    @app.get("/settings")
    async def get_settings(request: Request) -> dict[str, str]:
        """Return the cached backend settings."""
        state_container: AppContainer = request.app.state.container
        await state_container.settings_service.refresh()
        return state_container.settings_service.values

    @app.post("/settings")
    async def update_settings(
        body: SettingsUpdateRequest, request: Request
    ) -> dict[str, str]:
        """Update backend settings."""
        state_container: AppContainer = request.app.state.container
        return await state_container.settings_service.update(body.settings)

    return app


def _gallery_snapshot(
    container: AppContainer, result: Result[object] | None = None
) -> dict[str, object]:
    collection = container.collection
    return {
        "source": collection.source.value,
        "page": collection.page,
        "total_pages": collection.total_pages,
        "total": collection.total,
        "limit": collection.limit,
        "photos": [photo.model_dump() for photo in collection.items],
        "message": container.status_message.text,
        "stale": isinstance(result, Err),
    }
