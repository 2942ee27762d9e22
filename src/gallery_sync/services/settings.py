"""Cached view of the backend's settings."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from gallery_sync.adapters.settings_client import SettingsClient
from gallery_sync.domain.results import Err, Ok, Result

_logger = logging.getLogger(__name__)

GOOGLE_CREDENTIAL_FIELDS = ("google_client_id", "google_client_secret")


@dataclass
class SettingsService:
    """Holds the last settings read from the backend."""

    client: SettingsClient
    values: dict[str, str] = field(default_factory=dict)

    async def refresh(self) -> Result[dict[str, str]]:
        """Reload settings; keeps the previous values on failure."""
        try:
            values = await self.client.get_settings()
        except Exception as exc:
            _logger.exception("Failed to refresh settings")
            return Err(exc)
        self.values = dict(values)
        return Ok(self.values)

    async def update(self, values: dict[str, str]) -> dict[str, str]:
        """Persist settings and reload them."""
        await self.client.update_settings(values)
        await self.refresh()
        return self.values

    def missing_fields(self, names: Iterable[str]) -> list[str]:
        """Return the names that are unset or blank."""
        return [name for name in names if not str(self.values.get(name) or "").strip()]
