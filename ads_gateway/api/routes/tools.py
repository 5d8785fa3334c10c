"""
Tool Routes
===========

``GET /v1/tools`` opens the tool heartbeat stream; ``POST /v1/tools`` executes
one tool and returns its reshaped result.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from ads_gateway.api.dependencies import get_dispatcher, get_settings, get_sse_manager
from ads_gateway.api.sse.connection_manager import SSEConnectionManager
from ads_gateway.api.sse.events import heartbeat_payload, tool_ack_payload
from ads_gateway.config.logging import get_logger
from ads_gateway.config.settings import Settings
from ads_gateway.core.tools.dispatcher import TOOL_NAMES, ToolDispatcher
from ads_gateway.models.schemas import ErrorResponse, ToolInvocation, ToolResult

logger = get_logger(__name__)

router = APIRouter(
    prefix="/v1/tools",
    tags=["Tools"],
    responses={
        400: {"model": ErrorResponse, "description": "Unknown tool or invalid parameters"},
        500: {"model": ErrorResponse, "description": "Upstream failure"},
    },
)


@router.get("")
async def tool_stream(
    settings: Annotated[Settings, Depends(get_settings)],
    manager: Annotated[SSEConnectionManager, Depends(get_sse_manager)],
) -> StreamingResponse:
    """
    Establish the tool event stream.

    The first frame acknowledges the connection and lists the available tools;
    heartbeats follow on a fixed interval.
    """
    return await manager.open_stream(
        route="/v1/tools",
        interval=settings.sse_heartbeat_interval_seconds,
        ack=lambda connection_id: tool_ack_payload(connection_id, TOOL_NAMES),
        tick=heartbeat_payload,
    )


@router.post("", response_model=ToolResult)
async def execute_tool(
    invocation: ToolInvocation,
    dispatcher: Annotated[ToolDispatcher, Depends(get_dispatcher)],
) -> ToolResult:
    """
    Execute a tool.

    Args:
        invocation: Tool name and parameters

    Returns:
        Tool result; failures are rendered by the application's error handlers
    """
    logger.info("Tool execution requested", tool=invocation.name)
    result = await dispatcher.execute(invocation.name, invocation.params)
    return ToolResult(result=result)
