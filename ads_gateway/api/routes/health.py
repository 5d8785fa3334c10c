"""
Health Routes
=============

FastAPI routes for health check and service information endpoints.
"""

from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends

from ads_gateway.api.dependencies import get_dispatcher, get_settings, get_sse_manager
from ads_gateway.api.sse.connection_manager import SSEConnectionManager
from ads_gateway.config.settings import Settings
from ads_gateway.core.tools.dispatcher import ToolDispatcher
from ads_gateway.models.schemas import HealthStatus

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthStatus)
async def health_check(settings: Annotated[Settings, Depends(get_settings)]) -> HealthStatus:
    """Basic health check endpoint."""
    return HealthStatus(status="ok", message=f"{settings.app_name} is running")


@router.get("/", tags=["General"])
async def root(
    settings: Annotated[Settings, Depends(get_settings)],
    dispatcher: Annotated[ToolDispatcher, Depends(get_dispatcher)],
    manager: Annotated[SSEConnectionManager, Depends(get_sse_manager)],
) -> Dict[str, Any]:
    """
    Root endpoint with basic API information, the tool catalog and live
    stream counts.
    """
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "backend": settings.ads_backend,
        "health_check": "/health",
        "endpoints": {
            "time_stream": "GET /sse",
            "test_stream": "GET /test-sse",
            "tool_stream": "GET /v1/tools",
            "execute_tool": "POST /v1/tools",
        },
        "tools": dispatcher.describe(),
        "sse": manager.get_stats().model_dump(mode="json"),
    }
