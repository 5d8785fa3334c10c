"""
SSE Events
==========

SSE protocol formatting and the payloads written on each stream.
"""

from typing import Any, Dict, List
from datetime import datetime, timezone
import json


def format_sse_event(data: Dict[str, Any]) -> str:
    """
    Format data for Server-Sent Events protocol.

    Frames are unnamed so they reach the client's ``onmessage`` handler.

    Args:
        data: Event data dictionary

    Returns:
        Formatted SSE message string
    """
    data_json = json.dumps(data, default=str, separators=(",", ":"))

    # SSE protocol requires double newline at end
    return f"data: {data_json}\n\n"


def utc_timestamp() -> str:
    """Current UTC time in ISO-8601 with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def connected_payload() -> Dict[str, Any]:
    """Acknowledgment written first on the time streams."""
    return {"message": "connected"}


def time_payload() -> Dict[str, Any]:
    """Periodic frame on the time streams."""
    return {"time": utc_timestamp()}


def tool_ack_payload(connection_id: str, tools: List[str]) -> Dict[str, Any]:
    """Acknowledgment written first on the tool stream."""
    return {"type": "connection_ack", "connectionId": connection_id, "tools": tools}


def heartbeat_payload() -> Dict[str, Any]:
    """Periodic frame on the tool stream."""
    return {"type": "heartbeat", "timestamp": utc_timestamp()}
