"""Backend gallery API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class GalleryClient(Protocol):
    """Interface for gallery listing and deletion."""

    async def list_photos(
        self, source: str, limit: int, offset: int
    ) -> dict[str, object]:
        """Return one page of photos for a source."""

    async def delete_photo(self, photo_id: int) -> dict[str, object]:
        """Delete one photo."""

    async def delete_photos(self, source: str) -> dict[str, object]:
        """Delete every photo of a source."""


@dataclass
class HttpxGalleryClient(GalleryClient):
    """HTTPX-backed gallery client."""

    http_client: httpx.AsyncClient

    async def list_photos(
        self, source: str, limit: int, offset: int
    ) -> dict[str, object]:
        """List photos using the backend's offset pagination."""
        response = await self.http_client.get(
            "/gallery/photos",
            params={"source": source, "limit": limit, "offset": offset},
        )
        response.raise_for_status()
        return response.json()

    async def delete_photo(self, photo_id: int) -> dict[str, object]:
        """Delete one photo by id."""
        response = await self.http_client.delete(f"/gallery/photos/{photo_id}")
        response.raise_for_status()
        return response.json()

    async def delete_photos(self, source: str) -> dict[str, object]:
        """Delete all photos of a source."""
        response = await self.http_client.delete(
            "/gallery/photos", params={"source": source}
        )
        response.raise_for_status()
        return response.json()
