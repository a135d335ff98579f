"""Playlist routes — M3U file serving."""
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import unquote

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, Response

from app.dependencies import get_config_service, get_m3u_service, get_xtream_service
from app.models.xtream import Credentials
from app.services.category_service import build_category_map
from app.services.config_service import ConfigService
from app.services.filter_service import filter_streams, parse_category_filter
from app.services.http_client import ClientDisconnected, cancel_on_disconnect
from app.services.m3u_service import M3uService, playlist_filename
from app.services.xtream_service import XtreamError, XtreamService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["playlist"])

MISSING_PARAMETERS = "Missing required parameters"


@router.get("/serve-m3u")
async def serve_m3u(
    request: Request,
    url: Optional[str] = Query(None),
    u: Optional[str] = Query(None),
    p: Optional[str] = Query(None),
    cats: Optional[str] = Query(None),
    cfg: ConfigService = Depends(get_config_service),
    xtream: XtreamService = Depends(get_xtream_service),
    m3u: M3uService = Depends(get_m3u_service),
):
    if not url or not u or not p:
        return JSONResponse({"error": MISSING_PARAMETERS}, status_code=400)

    creds = Credentials(url=unquote(url), username=u, password=p)
    selected = parse_category_filter(cats)

    try:
        categories, streams = await cancel_on_disconnect(request, xtream.get_live_catalog(creds))
    except ClientDisconnected as e:
        logger.info(str(e))
        return Response(status_code=499)
    except XtreamError as e:
        logger.error(f"Error serving M3U: {e}")
        return JSONResponse({"error": str(e)}, status_code=500)

    included = filter_streams(streams, selected)
    content = m3u.generate_m3u(creds, included, build_category_map(categories))
    logger.info(
        f"Serving playlist with {len(included)} of {len(streams)} live streams "
        f"({len(selected) if selected else 'all'} categories selected) from {creds.url}"
    )

    config = cfg.config
    filename = playlist_filename(config.playlist_filename_prefix)
    return Response(
        content=content,
        media_type="audio/x-mpegurl",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": f"public, max-age={config.playlist_max_age}",
        },
    )
