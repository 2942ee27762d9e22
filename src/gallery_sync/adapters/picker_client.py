"""Backend client for the Google Photos picker flow."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class PickerClient(Protocol):
    """Interface for picker session endpoints."""

    async def create_session(self) -> dict[str, object]:
        """Create a picker session and return its id and picker URI."""

    async def poll_session(self, session_id: str) -> dict[str, object]:
        """Return whether the user finished picking."""

    async def process_session(self, session_id: str) -> dict[str, object] | None:
        """Ask the backend to import the picked items.

        Returns the response body when processing finished synchronously, or
        None when the backend accepted the work for background processing.
        """

    async def get_progress(self, session_id: str) -> dict[str, object]:
        """Return background processing progress for a session."""


@dataclass
class HttpxPickerClient(PickerClient):
    """HTTPX-backed picker client."""

    http_client: httpx.AsyncClient

    async def create_session(self) -> dict[str, object]:
        """Create a picker session."""
        response = await self.http_client.get("/google/picker/session")
        response.raise_for_status()
        return response.json()

    async def poll_session(self, session_id: str) -> dict[str, object]:
        """Poll picker completion."""
        response = await self.http_client.get(f"/google/picker/poll/{session_id}")
        response.raise_for_status()
        return response.json()

    async def process_session(self, session_id: str) -> dict[str, object] | None:
        """Trigger processing; 202 means it continues in the background."""
        response = await self.http_client.post(f"/google/picker/process/{session_id}")
        response.raise_for_status()
        if response.status_code == httpx.codes.ACCEPTED:
            return None
        return response.json()

    async def get_progress(self, session_id: str) -> dict[str, object]:
        """Fetch processing progress."""
        response = await self.http_client.get(f"/google/picker/progress/{session_id}")
        response.raise_for_status()
        return response.json()
