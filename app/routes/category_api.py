"""Category API routes — authenticated live category listing."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from app.dependencies import get_xtream_service
from app.models.xtream import Credentials
from app.services.category_service import visible_categories
from app.services.http_client import ClientDisconnected, cancel_on_disconnect
from app.services.xtream_service import XtreamError, XtreamService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["categories"])

MISSING_PARAMETERS = "Missing required parameters"


def _credentials_from_body(body) -> Credentials | None:
    if not isinstance(body, dict):
        return None
    fields = {key: body.get(key) for key in ("url", "username", "password")}
    if not all(isinstance(v, str) and v for v in fields.values()):
        return None
    return Credentials(**fields)


@router.post("/get-categories")
async def get_categories(request: Request, xtream: XtreamService = Depends(get_xtream_service)):
    try:
        body = await request.json()
    except ValueError:
        body = None

    creds = _credentials_from_body(body)
    if creds is None:
        return JSONResponse({"error": MISSING_PARAMETERS}, status_code=400)

    async def fetch():
        auth = await xtream.authenticate(creds)
        categories = await xtream.get_live_categories(creds)
        return auth, categories

    try:
        auth, categories = await cancel_on_disconnect(request, fetch())
    except ClientDisconnected as e:
        logger.info(str(e))
        return Response(status_code=499)
    except XtreamError as e:
        logger.error(f"Error fetching categories: {e}")
        return JSONResponse({"error": str(e)}, status_code=500)

    result = visible_categories(categories)
    logger.info(f"Returning {len(result)} of {len(categories)} live categories from {creds.url}")
    return {
        "success": True,
        "categories": [cat.model_dump() for cat in result],
        "server_info": auth.server_info,
    }
