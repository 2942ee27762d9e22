"""Synology Photos login, sync and album browsing."""

import logging
from dataclasses import dataclass, field

import httpx

from gallery_sync.adapters.synology_client import SynologyClient
from gallery_sync.domain.errors import SecondFactorRequiredError, SessionExpiredError
from gallery_sync.domain.results import Err, Ok, Result
from gallery_sync.domain.synology import Album
from gallery_sync.services.settings import SettingsService

_logger = logging.getLogger(__name__)


@dataclass
class SynologyService:
    """Orchestrates the stateful Synology provider through the backend.

    The backend keeps the Synology session id in its settings; a login test
    can rotate it and a logout clears it, so both refresh the settings view.
    """

    client: SynologyClient
    settings_service: SettingsService
    count: int = 0
    albums: list[Album] = field(default_factory=list)
    loading: bool = False
    error: str | None = None

    async def fetch_count(self) -> Result[int]:
        """Reload the synced photo count, keeping the old one on failure."""
        try:
            payload = await self.client.get_count()
            count = int(payload.get("count") or 0)
        except Exception as exc:
            _logger.exception("Failed to fetch Synology photo count")
            return Err(exc)
        self.count = count
        return Ok(count)

    async def fetch_albums(self) -> Result[list[Album]]:
        """Reload albums; raises ``SessionExpiredError`` on a 401."""
        self.loading = True
        self.error = None
        try:
            raw = await self.client.list_albums()
            albums = [Album.model_validate(item) for item in raw]
        except Exception as exc:
            if _status_code(exc) == httpx.codes.UNAUTHORIZED:
                raise SessionExpiredError() from exc
            _logger.exception("Failed to fetch Synology albums")
            self.error = _error_text(exc)
            return Err(exc)
        finally:
            self.loading = False
        self.albums = albums
        return Ok(albums)

    async def test_connection(self, challenge_code: str = "") -> dict[str, object]:
        """Log in to Synology; raises ``SecondFactorRequiredError`` on a 401."""
        self.loading = True
        try:
            try:
                result = await self.client.test_connection(challenge_code)
            except httpx.HTTPStatusError as exc:
                if exc.response.status_code == httpx.codes.UNAUTHORIZED:
                    raise SecondFactorRequiredError(_error_text(exc)) from exc
                raise
            await self.settings_service.refresh()
            await self.fetch_count()
            return result
        finally:
            self.loading = False

    async def sync(self) -> int:
        """Run a one-shot sync and return the new photo count."""
        self.loading = True
        try:
            try:
                await self.client.sync()
            except httpx.HTTPStatusError as exc:
                if exc.response.status_code == httpx.codes.UNAUTHORIZED:
                    raise SessionExpiredError(_error_text(exc)) from exc
                raise
            await self.fetch_count()
            return self.count
        finally:
            self.loading = False

    async def clear(self) -> None:
        """Remove synced photo references and refresh the count."""
        self.loading = True
        try:
            await self.client.clear()
            await self.fetch_count()
        finally:
            self.loading = False

    async def logout(self) -> None:
        """Log out and forget everything cached about the Synology session."""
        self.loading = True
        try:
            await self.client.logout()
            await self.settings_service.refresh()
            self.count = 0
            self.albums = []
        finally:
            self.loading = False


def _status_code(exc: Exception) -> int | None:
    """Extract the HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    return status_code if isinstance(status_code, int) else None


def _error_text(exc: Exception) -> str:
    """Prefer the backend's ``error`` field over the exception text."""
    response = getattr(exc, "response", None)
    if isinstance(response, httpx.Response):
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("error"):
            return str(payload["error"])
    return str(exc)
