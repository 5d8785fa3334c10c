"""
SSE Routes
==========

Generic time streams: a ``connected`` acknowledgment followed by the current
time on a fixed interval.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from ads_gateway.api.dependencies import get_settings, get_sse_manager
from ads_gateway.api.sse.connection_manager import SSEConnectionManager
from ads_gateway.api.sse.events import connected_payload, time_payload
from ads_gateway.config.settings import Settings

router = APIRouter(tags=["SSE"])


async def _time_stream(
    route: str, settings: Settings, manager: SSEConnectionManager
) -> StreamingResponse:
    return await manager.open_stream(
        route=route,
        interval=settings.sse_time_interval_seconds,
        ack=lambda connection_id: connected_payload(),
        tick=time_payload,
    )


@router.get("/sse")
async def time_stream(
    settings: Annotated[Settings, Depends(get_settings)],
    manager: Annotated[SSEConnectionManager, Depends(get_sse_manager)],
) -> StreamingResponse:
    """Stream the server time."""
    return await _time_stream("/sse", settings, manager)


@router.get("/test-sse")
async def test_stream(
    settings: Annotated[Settings, Depends(get_settings)],
    manager: Annotated[SSEConnectionManager, Depends(get_sse_manager)],
) -> StreamingResponse:
    """Same stream as ``/sse``, for connectivity checks from clients."""
    return await _time_stream("/test-sse", settings, manager)
