"""Backend client for the Synology Photos provider."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class SynologyClient(Protocol):
    """Interface for the backend's Synology endpoints."""

    async def get_count(self) -> dict[str, object]:
        """Return the number of synced Synology photos."""

    async def list_albums(self) -> list[dict[str, object]]:
        """Return the albums visible to the stored Synology session."""

    async def test_connection(self, otp_code: str) -> dict[str, object]:
        """Log in to Synology, optionally with a one-time code."""

    async def sync(self) -> None:
        """Trigger a one-shot sync."""

    async def logout(self) -> None:
        """Drop the backend's Synology session."""

    async def clear(self) -> None:
        """Remove all synced Synology photo references."""


@dataclass
class HttpxSynologyClient(SynologyClient):
    """HTTPX-backed Synology client."""

    http_client: httpx.AsyncClient

    async def get_count(self) -> dict[str, object]:
        """Fetch the synced photo count."""
        response = await self.http_client.get("/synology/count")
        response.raise_for_status()
        return response.json()

    async def list_albums(self) -> list[dict[str, object]]:
        """Fetch albums."""
        response = await self.http_client.get("/synology/albums")
        response.raise_for_status()
        return response.json() or []

    async def test_connection(self, otp_code: str) -> dict[str, object]:
        """Submit a login test."""
        response = await self.http_client.post(
            "/synology/test", json={"otp_code": otp_code}
        )
        response.raise_for_status()
        return response.json()

    async def sync(self) -> None:
        """Trigger a sync."""
        response = await self.http_client.post("/synology/sync")
        response.raise_for_status()

    async def logout(self) -> None:
        """Log out of Synology."""
        response = await self.http_client.post("/synology/logout")
        response.raise_for_status()

    async def clear(self) -> None:
        """Clear synced references."""
        response = await self.http_client.post("/synology/clear")
        response.raise_for_status()
