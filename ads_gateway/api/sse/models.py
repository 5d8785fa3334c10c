"""
SSE Models
==========

Connection state and statistics for the SSE infrastructure.
"""

from typing import Dict
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, Field


class SSEConnectionState(str, Enum):
    """SSE connection state. Transitions only move forward."""

    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class SSEConnectionStats(BaseModel):
    """Statistics for SSE connections."""

    total_connections: int = Field(default=0, description="Total active connections")
    connections_by_route: Dict[str, int] = Field(
        default_factory=dict, description="Active connections per route"
    )
    total_opened: int = Field(default=0, description="Connections opened since startup")
    last_updated: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Last stats update"
    )
