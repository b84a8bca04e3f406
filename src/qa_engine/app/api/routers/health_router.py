# qa_engine/app/api/routers/health_router.py

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, status

from qa_engine.config import settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Check if the engine server is running.",
)
async def health_check() -> Dict[str, Any]:
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "target": settings.API_BASE_URL,
    }
