"""Backend settings API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class SettingsClient(Protocol):
    """Interface for the backend key-value settings store."""

    async def get_settings(self) -> dict[str, str]:
        """Return all settings."""

    async def update_settings(self, values: dict[str, str]) -> None:
        """Persist the given settings."""


@dataclass
class HttpxSettingsClient(SettingsClient):
    """HTTPX-backed settings client."""

    http_client: httpx.AsyncClient

    async def get_settings(self) -> dict[str, str]:
        """Fetch settings."""
        response = await self.http_client.get("/settings")
        response.raise_for_status()
        return response.json()

    async def update_settings(self, values: dict[str, str]) -> None:
        """Update settings."""
        response = await self.http_client.post("/settings", json={"settings": values})
        response.raise_for_status()
