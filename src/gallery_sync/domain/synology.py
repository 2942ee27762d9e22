"""Domain models for the Synology Photos provider."""

from pydantic import BaseModel, ConfigDict


class Album(BaseModel):
    """Album or shared folder listed by Synology Photos."""

    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    type: str | None = None
