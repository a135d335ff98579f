"""Xtream service — authentication, live categories and live streams from a provider."""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from app.models.xtream import AuthResult, Category, Credentials, LiveStream

if TYPE_CHECKING:
    from app.services.http_client import HttpClientService

logger = logging.getLogger(__name__)

PLAYER_API = "player_api.php"

_categories_adapter = TypeAdapter(list[Category])
_streams_adapter = TypeAdapter(list[LiveStream])


class XtreamError(Exception):
    """Base error for provider calls; the message is shown to the client."""


class UpstreamUnavailable(XtreamError):
    """The provider could not be reached or answered with a non-2xx status."""


class InvalidUpstreamResponse(UpstreamUnavailable):
    """The provider answered, but not with the JSON shape we expect."""


class AuthenticationFailed(XtreamError):
    """The provider rejected the credentials."""


class XtreamService:
    """Thin client for the three ``player_api.php`` calls the proxy needs."""

    def __init__(self, http_client: "HttpClientService"):
        self.http_client = http_client

    async def _get_json(self, creds: Credentials, action: Optional[str], error: str):
        params = creds.params
        if action:
            params["action"] = action
        client = await self.http_client.get_client()
        try:
            response = await client.get(f"{creds.url}/{PLAYER_API}", params=params)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Upstream request failed ({action or 'auth'}): {e!r}")
            raise UpstreamUnavailable(error) from e

        if not response.is_success:
            logger.error(f"Upstream returned HTTP {response.status_code} ({action or 'auth'})")
            raise UpstreamUnavailable(error)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Upstream returned invalid JSON ({action or 'auth'}): {e}")
            raise InvalidUpstreamResponse(f"{error}: invalid response from Xtream server") from e

    async def authenticate(self, creds: Credentials) -> AuthResult:
        """Check the credentials; returns the auth result when ``auth == 1``."""
        data = await self._get_json(creds, None, "Failed to authenticate with Xtream server")
        if not isinstance(data, dict):
            raise AuthenticationFailed("Invalid credentials or authentication failed")
        try:
            result = AuthResult.model_validate(data)
        except ValidationError as e:
            raise InvalidUpstreamResponse(
                "Failed to authenticate with Xtream server: invalid response from Xtream server"
            ) from e
        if not result.authenticated:
            logger.info(f"Authentication rejected for user '{creds.username}' at {creds.url}")
            raise AuthenticationFailed("Invalid credentials or authentication failed")
        return result

    async def get_live_categories(self, creds: Credentials) -> list[Category]:
        error = "Failed to fetch categories"
        data = await self._get_json(creds, "get_live_categories", error)
        try:
            return _categories_adapter.validate_python(data)
        except ValidationError as e:
            logger.error(f"Unexpected live categories payload: {e}")
            raise InvalidUpstreamResponse(f"{error}: invalid response from Xtream server") from e

    async def get_live_streams(self, creds: Credentials) -> list[LiveStream]:
        error = "Failed to fetch streams"
        data = await self._get_json(creds, "get_live_streams", error)
        try:
            return _streams_adapter.validate_python(data)
        except ValidationError as e:
            logger.error(f"Unexpected live streams payload: {e}")
            raise InvalidUpstreamResponse(f"{error}: invalid response from Xtream server") from e

    async def get_live_catalog(self, creds: Credentials) -> tuple[list[Category], list[LiveStream]]:
        """Fetch live categories and streams concurrently.

        The first failure cancels the other request and is re-raised.
        """
        cat_task = asyncio.ensure_future(self.get_live_categories(creds))
        stream_task = asyncio.ensure_future(self.get_live_streams(creds))
        try:
            categories, streams = await asyncio.gather(cat_task, stream_task)
        except BaseException:
            cat_task.cancel()
            stream_task.cancel()
            raise
        return categories, streams
