"""Relay service: forwards one uploaded image to remove.bg with the server-side key."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response

from creative_pilot.app.settings import Settings
from creative_pilot.tools.image_ops.remove_bg import BackgroundRemover, RemoveBgApiClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/remove-bg")
async def remove_bg(request: Request, image: Optional[UploadFile] = File(None)) -> Response:
    """Accepts multipart field `image`, returns the background-stripped PNG."""
    if image is None:
        return PlainTextResponse("No file uploaded", status_code=400)

    payload = await image.read()
    if not payload:
        return PlainTextResponse("No file uploaded", status_code=400)

    remover: BackgroundRemover = request.app.state.remover
    try:
        result = await remover.remove_background(payload, filename=image.filename or "image.png")
    except Exception:
        logger.exception("remove-bg relay failed for %s (%d bytes)", image.filename, len(payload))
        return PlainTextResponse("Error removing background", status_code=500)

    return Response(content=result, media_type="image/png")


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


def create_relay_app(remover: BackgroundRemover) -> FastAPI:
    """Build the relay app around an already-configured remover."""
    app = FastAPI(title="CreativePilot remove-bg relay")
    app.state.remover = remover
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


def create_relay_app_from_settings(settings: Settings) -> FastAPI:
    remover = RemoveBgApiClient(
        settings.require_remove_bg_key(),
        api_url=settings.remove_bg_api_url,
        timeout_s=settings.bg_removal_timeout_s,
    )
    return create_relay_app(remover)
