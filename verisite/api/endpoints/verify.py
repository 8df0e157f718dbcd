"""Content verification API endpoints."""

import asyncio
import contextlib
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field, ValidationError

from ...domain.models.content import ImageContent
from ...domain.services.verification_pipeline import VerificationPipeline
from ...infrastructure.dependencies import ServiceContainer, get_container

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/verify", tags=["verify"])

DISCONNECT_POLL_SECONDS = 0.5
CLIENT_CLOSED_REQUEST = 499


class TextVerifyRequest(BaseModel):
    """Request model for text verification."""

    text: str = Field(default="", description="Text to verify")


class ImageVerifyRequest(BaseModel):
    """Request model for image verification."""

    format: str = Field(default="jpeg", description="Image format")
    data: str = Field(default="", description="Base64-encoded, already normalized image")


def _bad_request(error: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "error": error})


async def _run_until_disconnect(request: Request, work: Awaitable[Dict[str, Any]]) -> Response:
    """Run a verification, cancelling it if the client goes away first."""
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
            if done:
                break
            if await request.is_disconnected():
                logger.warning("🔌 Client disconnected, cancelling verification")
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
                return Response(status_code=CLIENT_CLOSED_REQUEST)
    finally:
        if not task.done():
            task.cancel()

    result = task.result()
    return JSONResponse(status_code=200 if result.get("success") else 500, content=result)


@router.post("/text")
async def verify_text(
    body: TextVerifyRequest,
    request: Request,
    container: ServiceContainer = Depends(get_container),
) -> Response:
    """Verify the factual claims in a piece of text."""
    if not body.text.strip():
        return _bad_request("No text provided")

    logger.info(f"📝 Verification requested for text: {body.text[:100]}")
    pipeline: VerificationPipeline = container.get_pipeline()
    return await _run_until_disconnect(request, pipeline.verify_text(body.text))


@router.post("/image")
async def verify_image(
    body: ImageVerifyRequest,
    request: Request,
    container: ServiceContainer = Depends(get_container),
) -> Response:
    """Verify the factual claims in an already normalized image."""
    if not body.data:
        return _bad_request("No image provided")
    try:
        image = ImageContent(format=body.format, data=body.data)
    except ValidationError:
        return _bad_request("Invalid image payload")

    pipeline: VerificationPipeline = container.get_pipeline()
    return await _run_until_disconnect(request, pipeline.verify_image(image))


@router.get("/health")
async def verification_health(container: ServiceContainer = Depends(get_container)) -> Dict[str, Any]:
    """Report provider enablement, enabled connectors and cache statistics."""
    return {
        "status": "healthy",
        "providers": container.settings.provider_status(),
        "ai_providers": container.ai_providers,
        "connectors": [connector.name for connector in container.get_connectors()],
        "cache": await container.get_cache().stats(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.post("/clear-cache")
async def clear_cache(container: ServiceContainer = Depends(get_container)) -> Dict[str, Any]:
    """Drop every cached search result."""
    cleared = await container.get_cache().clear()
    if cleared:
        logger.info("🧹 Search cache cleared")
    return {
        "success": cleared,
        "message": "Cache cleared" if cleared else "Cache could not be cleared",
    }
