"""
Server-Sent Events (SSE) Infrastructure
======================================

Long-lived event streams that acknowledge a connection and then emit periodic
time or heartbeat frames until the client disconnects.

Components:
- Connection Manager: Per-connection state machine, timer and stream lifecycle
- Events: SSE frame formatting and frame payload builders
- Models: Pydantic models for connection state and statistics
"""

from .connection_manager import SSEConnection, SSEConnectionManager
from .events import format_sse_event
from .models import SSEConnectionState, SSEConnectionStats

__all__ = [
    "SSEConnection",
    "SSEConnectionManager",
    "format_sse_event",
    "SSEConnectionState",
    "SSEConnectionStats",
]
