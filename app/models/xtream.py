"""Pydantic models for Xtream Codes API payloads."""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_text(value: Any) -> Any:
    """Providers send ids as ints or strings and text fields as null."""
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Credentials(BaseModel):
    """Provider base URL plus the subscriber's username and password."""

    url: str
    username: str
    password: str

    @field_validator("url", "username", "password")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        # Only one slash is removed
        return value[:-1] if value.endswith("/") else value

    @property
    def params(self) -> dict:
        return {"username": self.username, "password": self.password}


class UserInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    auth: int = 0
    username: str = ""
    status: str = ""
    message: str = ""


class AuthResult(BaseModel):
    """Response of ``player_api.php`` called without an action."""
    model_config = ConfigDict(extra="allow")

    user_info: Optional[UserInfo] = None
    server_info: dict = Field(default_factory=dict)

    @field_validator("server_info", mode="before")
    @classmethod
    def _server_info_dict(cls, value: Any) -> Any:
        return value if value else {}

    @property
    def authenticated(self) -> bool:
        return self.user_info is not None and self.user_info.auth == 1


class Category(BaseModel):
    """A live TV category as returned by ``get_live_categories``."""
    model_config = ConfigDict(extra="allow")

    category_id: str
    category_name: str = ""
    parent_id: int = 0

    @field_validator("category_id", "category_name", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("parent_id", mode="before")
    @classmethod
    def _parent(cls, value: Any) -> Any:
        return 0 if value in (None, "") else value


class LiveStream(BaseModel):
    """A live channel as returned by ``get_live_streams``."""
    model_config = ConfigDict(extra="allow")

    num: Optional[int] = None
    name: str = ""
    stream_type: str = "live"
    stream_id: int
    stream_icon: str = ""
    epg_channel_id: str = ""
    category_id: Optional[str] = None

    @field_validator("name", "stream_type", "stream_icon", "epg_channel_id", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("category_id", mode="before")
    @classmethod
    def _category(cls, value: Any) -> Any:
        if value is None:
            return None
        return _as_text(value)

    @field_validator("num", mode="before")
    @classmethod
    def _num(cls, value: Any) -> Optional[int]:
        # Display-only position; providers send "N/A", "" or floats here
        try:
            return int(value)
        except (TypeError, ValueError):
            return None
