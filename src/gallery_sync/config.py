"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    backend_base_url: str = "http://localhost:9607/api"
    api_token: str | None = None
    page_limit: int = Field(default=48, gt=0)
    poll_interval_seconds: float = Field(default=2.0, gt=0)
    message_ttl_seconds: float = 5.0
    # 900 polls at the default interval is roughly 30 minutes.
    max_completion_polls: int | None = 900
    request_timeout_seconds: float = 15.0
    open_browser: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
