"""Paginated photo collection for the active source."""

import logging
import math
from dataclasses import dataclass, field

from gallery_sync.adapters.gallery_client import GalleryClient
from gallery_sync.domain.photos import Photo, PhotoPage, PhotoSource
from gallery_sync.domain.results import Err, Ok, Result
from gallery_sync.services.messages import StatusMessage

_logger = logging.getLogger(__name__)

_DELETE_ALL_DEFAULT_MESSAGE = "All photos deleted successfully!"


@dataclass
class PhotoCollection:
    """Current page of photos for one source, with navigation and deletion.

    Reads (``fetch`` and the navigation built on it) log failures and return
    ``Err`` while keeping the previous page. Deletions raise.
    """

    client: GalleryClient
    message: StatusMessage = field(default_factory=StatusMessage)
    limit: int = 48
    message_ttl_seconds: float = 5.0
    source: PhotoSource = PhotoSource.GOOGLE_PHOTOS
    items: list[Photo] = field(default_factory=list)
    total: int = 0
    page: int = 1
    loading: bool = False

    def __post_init__(self) -> None:
        if self.limit <= 0:
            raise ValueError("limit must be positive")

    @property
    def total_pages(self) -> int:
        """Number of pages needed for ``total`` photos."""
        return math.ceil(self.total / self.limit)

    @property
    def offset(self) -> int:
        """Offset of the first photo on the current page."""
        return (self.page - 1) * self.limit

    async def set_source(self, source: PhotoSource) -> Result[PhotoPage]:
        """Switch to another source and load its first page."""
        self.source = source
        self.page = 1
        self.items = []
        self.total = 0
        return await self.fetch()

    async def fetch(self) -> Result[PhotoPage]:
        """Load the current page, clamping ``page`` if the data shrank."""
        result = await self._fetch_page()
        # Each pass strictly lowers ``page``, so this ends.
        while isinstance(result, Ok) and self.page > max(1, self.total_pages):
            self.page = max(1, self.total_pages)
            _logger.info("Page out of range after fetch; moved to page %s", self.page)
            result = await self._fetch_page()
        return result

    async def next_page(self) -> Result[PhotoPage] | None:
        """Advance one page; returns None when already on the last page."""
        if self.page >= self.total_pages:
            return None
        self.page += 1
        return await self._fetch_or_restore(self.page - 1)

    async def previous_page(self) -> Result[PhotoPage] | None:
        """Go back one page; returns None when already on the first page."""
        if self.page <= 1:
            return None
        self.page -= 1
        return await self._fetch_or_restore(self.page + 1)

    async def delete_one(self, photo_id: int) -> None:
        """Delete a photo and reload the current page."""
        try:
            await self.client.delete_photo(photo_id)
        except Exception:
            _logger.exception("Failed to delete photo %s", photo_id)
            raise
        await self.fetch()

    async def delete_all(self) -> str:
        """Delete every photo of the active source and return the status text."""
        try:
            payload = await self.client.delete_photos(self.source.value)
        except Exception:
            _logger.exception("Failed to delete photos for %s", self.source.value)
            raise
        text = str(payload.get("message") or _DELETE_ALL_DEFAULT_MESSAGE)
        self.message.show(text, ttl_seconds=self.message_ttl_seconds)
        self.page = 1
        await self.fetch()
        return text

    async def _fetch_or_restore(self, previous_page: int) -> Result[PhotoPage]:
        result = await self.fetch()
        if isinstance(result, Err):
            self.page = previous_page
        return result

    async def _fetch_page(self) -> Result[PhotoPage]:
        source = self.source
        self.loading = True
        try:
            raw = await self.client.list_photos(
                source.value, limit=self.limit, offset=self.offset
            )
            page = PhotoPage.model_validate(_without_nulls(raw))
        except Exception as exc:
            _logger.exception("Failed to fetch photos for %s", source.value)
            return Err(exc)
        finally:
            self.loading = False
        if source != self.source:
            _logger.info(
                "Dropping stale page for %s; active source is %s",
                source.value,
                self.source.value,
            )
            return Ok(page)
        self.items = page.photos
        self.total = page.total
        return Ok(page)


def _without_nulls(raw: dict[str, object]) -> dict[str, object]:
    """Drop null fields so model defaults apply (the backend sends photos: null)."""
    return {key: value for key, value in raw.items() if value is not None}
