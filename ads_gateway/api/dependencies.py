"""
Route Dependencies
==================

FastAPI dependencies resolving the collaborators stored on ``app.state`` by
the application factory.
"""

from fastapi import Request

from ads_gateway.api.sse.connection_manager import SSEConnectionManager
from ads_gateway.config.settings import Settings
from ads_gateway.core.tools.dispatcher import ToolDispatcher


def get_settings(request: Request) -> Settings:
    """Settings the application was built with."""
    return request.app.state.settings


def get_dispatcher(request: Request) -> ToolDispatcher:
    return request.app.state.dispatcher


def get_sse_manager(request: Request) -> SSEConnectionManager:
    return request.app.state.sse_manager
