"""FastAPI dependency injection — provides services via Depends()."""
from __future__ import annotations

from fastapi import Request

from app.services.config_service import ConfigService
from app.services.m3u_service import M3uService
from app.services.xtream_service import XtreamService


def get_config_service(request: Request) -> ConfigService:
    return request.app.state.config_service


def get_xtream_service(request: Request) -> XtreamService:
    return request.app.state.xtream_service


def get_m3u_service(request: Request) -> M3uService:
    return request.app.state.m3u_service
