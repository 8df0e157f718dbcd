"""Health check endpoints."""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...infrastructure.dependencies import ServiceContainer, get_container

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(container: ServiceContainer = Depends(get_container)) -> Dict[str, Any]:
    """Check service liveness and which providers are configured."""
    return {
        "status": "healthy",
        "version": "0.1.0",
        "providers": container.settings.provider_status(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
