"""HTTP client service — managed httpx.AsyncClient with connection pooling."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

import httpx
from fastapi import Request

from app.models.config import AppConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Seconds between checks of the inbound connection while waiting on upstream
DISCONNECT_POLL_INTERVAL = 0.5


class ClientDisconnected(Exception):
    """The inbound client went away before the upstream calls finished."""


class HttpClientService:
    """Manages a global httpx.AsyncClient with connection pooling."""

    def __init__(self, config: Optional[AppConfig] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config or AppConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _headers(self) -> dict:
        return {
            "User-Agent": self.config.user_agent,
            "Accept": "*/*",
            "Accept-Language": "en-US,en;q=0.9",
            "Connection": "keep-alive",
        }

    async def get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            t = self.config.upstream_timeout
            self._client = httpx.AsyncClient(
                headers=self._headers(),
                timeout=httpx.Timeout(connect=t.connect, read=t.read, write=t.write, pool=t.pool),
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
            logger.info("Global HTTP client closed")


async def cancel_on_disconnect(request: Request, awaitable: Awaitable[T]) -> T:
    """Await *awaitable*, cancelling it if the inbound client disconnects.

    Raises ``ClientDisconnected`` when the client goes away first.
    """
    work = asyncio.ensure_future(awaitable)

    async def watch():
        while not await request.is_disconnected():
            await asyncio.sleep(DISCONNECT_POLL_INTERVAL)

    watcher = asyncio.ensure_future(watch())
    try:
        done, _ = await asyncio.wait({work, watcher}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        work.cancel()
        raise
    finally:
        watcher.cancel()

    if work in done:
        return work.result()
    if watcher.exception() is not None:
        # Connection state unknown, keep waiting on upstream
        return await work

    work.cancel()
    try:
        await work
    except asyncio.CancelledError:
        pass
    raise ClientDisconnected(f"Client disconnected from {request.url.path}")
