"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from gallery_sync.adapters.gallery_client import HttpxGalleryClient
from gallery_sync.adapters.interaction_surface import (
    BrowserInteractionSurface,
    HandoffInteractionSurface,
    InteractionSurface,
)
from gallery_sync.adapters.picker_client import HttpxPickerClient
from gallery_sync.adapters.settings_client import HttpxSettingsClient
from gallery_sync.adapters.synology_client import HttpxSynologyClient
from gallery_sync.adapters.transport import TokenStore, build_http_client
from gallery_sync.config import Settings
from gallery_sync.services.gallery import PhotoCollection
from gallery_sync.services.imports import ImportSessionController
from gallery_sync.services.messages import StatusMessage
from gallery_sync.services.settings import SettingsService
from gallery_sync.services.synology import SynologyService

LOGIN_REQUIRED_MESSAGE = "Login required"


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_store: TokenStore
    status_message: StatusMessage
    settings_service: SettingsService
    collection: PhotoCollection
    import_controller: ImportSessionController
    synology_service: SynologyService
    close_resources: Callable[[], Awaitable[None]]


def build_container(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    token_store = TokenStore(resolved_settings.api_token)
    status_message = StatusMessage()

    async def on_unauthorized() -> None:
        status_message.show(LOGIN_REQUIRED_MESSAGE)

    http_client = build_http_client(
        resolved_settings.backend_base_url,
        token_store,
        on_unauthorized=on_unauthorized,
        timeout=resolved_settings.request_timeout_seconds,
        transport=transport,
    )
    settings_service = SettingsService(HttpxSettingsClient(http_client))
    collection = PhotoCollection(
        client=HttpxGalleryClient(http_client),
        message=status_message,
        limit=resolved_settings.page_limit,
        message_ttl_seconds=resolved_settings.message_ttl_seconds,
    )
    surface: InteractionSurface = (
        BrowserInteractionSurface()
        if resolved_settings.open_browser
        else HandoffInteractionSurface()
    )
    import_controller = ImportSessionController(
        picker_client=HttpxPickerClient(http_client),
        settings_service=settings_service,
        collection=collection,
        message=status_message,
        surface=surface,
        poll_interval_seconds=resolved_settings.poll_interval_seconds,
        message_ttl_seconds=resolved_settings.message_ttl_seconds,
        max_completion_polls=resolved_settings.max_completion_polls,
    )
    synology_service = SynologyService(
        client=HttpxSynologyClient(http_client),
        settings_service=settings_service,
    )

    async def close_resources() -> None:
        await import_controller.close()
        await http_client.aclose()

    return AppContainer(
        settings=resolved_settings,
        token_store=token_store,
        status_message=status_message,
        settings_service=settings_service,
        collection=collection,
        import_controller=import_controller,
        synology_service=synology_service,
        close_resources=close_resources,
    )
