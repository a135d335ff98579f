"""Pydantic models for application configuration."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class UpstreamTimeout(BaseModel):
    """Timeouts (seconds) applied to every call to the provider."""
    model_config = ConfigDict(extra="allow")

    connect: float = 30.0
    read: float = 600.0
    write: float = 30.0
    pool: float = 30.0


class AppConfig(BaseModel):
    """Root config file structure."""
    model_config = ConfigDict(extra="allow")

    log_level: str = "INFO"
    user_agent: str = DEFAULT_USER_AGENT
    upstream_timeout: UpstreamTimeout = Field(default_factory=UpstreamTimeout)
    playlist_max_age: int = 3600
    playlist_filename_prefix: str = "xtream_playlist"
    live_extension: str = "ts"

    @field_validator("log_level")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.upper()

    @field_validator("live_extension")
    @classmethod
    def _extension(cls, value: str) -> str:
        return value.lstrip(".") or "ts"

    @field_validator("playlist_max_age")
    @classmethod
    def _max_age(cls, value: int) -> int:
        return max(value, 0)
