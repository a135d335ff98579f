"""Xtream playlist proxy — FastAPI application."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.routes import category_api, health, playlist
from app.services.config_service import ConfigService
from app.services.http_client import HttpClientService
from app.services.m3u_service import M3uService
from app.services.xtream_service import XtreamService

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    # httpx logs full request URLs, which carry the subscriber's password
    logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - closes the pooled HTTP client on shutdown"""
    logger.info("Xtream playlist proxy started")
    yield
    await app.state.http_client.close()
    logger.info("Application shutdown complete")


def create_app(
    config_service: Optional[ConfigService] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build a fully-wired FastAPI app.

    ``transport`` is handed to the upstream httpx client; tests pass an
    ``httpx.MockTransport`` here.
    """
    if config_service is None:
        config_service = ConfigService()
        config_service.load()
    config = config_service.config
    configure_logging(config.log_level)

    http = HttpClientService(config, transport=transport)

    app = FastAPI(title="Xtream Playlist Proxy", version=health.APP_VERSION, lifespan=lifespan)

    # Attach state for DI
    app.state.config_service = config_service
    app.state.http_client = http
    app.state.xtream_service = XtreamService(http)
    app.state.m3u_service = M3uService(config.live_extension)

    @app.exception_handler(StarletteHTTPException)
    async def method_not_allowed(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            return JSONResponse({"error": "Method not allowed"}, status_code=405, headers=exc.headers)
        return await http_exception_handler(request, exc)

    # Middleware to ensure UTF-8 charset in JSON responses
    @app.middleware("http")
    async def add_utf8_charset(request: Request, call_next):
        response = await call_next(request)
        ct = response.headers.get("content-type", "")
        if "application/json" in ct and "charset" not in ct:
            response.headers["content-type"] = "application/json; charset=utf-8"
        return response

    for r in (health, category_api, playlist):
        app.include_router(r.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=5000)
