"""Domain models for gallery photos."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class PhotoSource(StrEnum):
    """Provider a photo or an import originates from."""

    GOOGLE_PHOTOS = "google_photos"
    SYNOLOGY_PHOTOS = "synology_photos"
    TELEGRAM = "telegram"
    URL_PROXY = "url_proxy"


class Photo(BaseModel):
    """Gallery photo as returned by the backend."""

    model_config = ConfigDict(extra="allow")

    id: int
    thumbnail_url: str | None = None
    caption: str | None = None
    width: int | None = None
    height: int | None = None
    orientation: str | None = None
    source: str | None = None


class PhotoPage(BaseModel):
    """One page of photos plus the total across all pages."""

    photos: list[Photo] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
