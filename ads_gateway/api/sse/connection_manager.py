"""
SSE Connection Manager
=====================

Manages Server-Sent Events connections.
Handles connection lifecycle, the per-connection timer and stream delivery.
"""

from typing import Any, AsyncIterator, Callable, Dict, Optional
import asyncio
import uuid
from collections import Counter
from datetime import datetime, timezone

from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from ads_gateway.config.logging import get_logger
from ads_gateway.core.errors import TooManyConnectionsError

from .events import format_sse_event
from .models import SSEConnectionState, SSEConnectionStats

logger = get_logger(__name__)

PayloadFactory = Callable[[], Dict[str, Any]]

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable Nginx buffering
}


class SSEConnection:
    """
    One open event stream.

    Owned by the request that created it. Frames are only enqueued while the
    connection is OPEN; closing cancels the timer once and moves the state
    through CLOSING to CLOSED.
    """

    def __init__(
        self,
        route: str,
        interval: float,
        tick: PayloadFactory,
        connection_id: Optional[str] = None,
    ) -> None:
        self.connection_id = connection_id or str(uuid.uuid4())
        self.route = route
        self.interval = interval
        self.created_at = datetime.now(timezone.utc)
        self.state = SSEConnectionState.OPEN
        self.events_sent = 0
        self.close_reason: Optional[str] = None
        self._tick = tick
        self._queue: asyncio.Queue[Optional[str]] = asyncio.Queue()
        self._timer: Optional[asyncio.Task[None]] = None
        self.logger = logger.bind(connection_id=self.connection_id, route=route)

    @property
    def is_open(self) -> bool:
        return self.state is SSEConnectionState.OPEN

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return (datetime.now(timezone.utc) - self.created_at).total_seconds()

    def start(self, ack: Dict[str, Any]) -> None:
        """Write the acknowledgment frame, then schedule the periodic timer."""
        self.write(ack)
        self._timer = asyncio.create_task(
            self._run_timer(), name=f"sse-timer-{self.connection_id}"
        )

    def write(self, data: Dict[str, Any]) -> bool:
        """
        Enqueue one frame.

        Returns:
            False if the connection is no longer open and nothing was written
        """
        if not self.is_open:
            return False
        self._queue.put_nowait(format_sse_event(data))
        self.events_sent += 1
        return True

    async def _run_timer(self) -> None:
        while self.is_open:
            await asyncio.sleep(self.interval)
            if not self.write(self._tick()):
                break

    def close(self, reason: str = "closed") -> bool:
        """
        Close the connection.

        Returns:
            True on the first call, False if the connection was already closing or closed
        """
        if not self.is_open:
            return False

        self.state = SSEConnectionState.CLOSING
        self.close_reason = reason
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()

        # Frames not yet handed to the transport are dropped
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(None)

        self.state = SSEConnectionState.CLOSED
        self.logger.info(
            "SSE connection closed",
            reason=reason,
            events_sent=self.events_sent,
            age_seconds=round(self.age, 3),
        )
        return True

    async def frames(self) -> AsyncIterator[str]:
        """
        Yield formatted frames until the connection closes.

        Yields:
            SSE formatted events
        """
        while True:
            frame = await self._queue.get()

            # None is a signal to stop
            if frame is None:
                break

            yield frame


class SSEConnectionManager:
    """
    Tracks live SSE connections and builds their streaming responses.

    Handles:
    - Connection lifecycle (open, periodic frames, close)
    - Connection limit
    - Closing every stream on shutdown
    """

    def __init__(self, max_connections: int = 100) -> None:
        """Initialize connection manager."""
        self.max_connections = max_connections
        self.connections: Dict[str, SSEConnection] = {}
        self.total_opened = 0
        self.logger: Any = logger.bind(component="sse_manager")

    async def open_stream(
        self,
        route: str,
        interval: float,
        ack: Callable[[str], Dict[str, Any]],
        tick: PayloadFactory,
    ) -> StreamingResponse:
        """
        Open a new SSE connection and return its streaming response.

        Args:
            route: Route path, for logging and statistics
            interval: Seconds between periodic frames
            ack: Builds the acknowledgment payload from the connection ID
            tick: Builds each periodic payload

        Returns:
            Streaming response with SSE events

        Raises:
            TooManyConnectionsError: If the connection limit is reached
        """
        if len(self.connections) >= self.max_connections:
            self.logger.warning(
                "SSE connection rejected", route=route, max_connections=self.max_connections
            )
            raise TooManyConnectionsError(
                f"Maximum of {self.max_connections} SSE connections reached"
            )

        connection = SSEConnection(route=route, interval=interval, tick=tick)
        self.connections[connection.connection_id] = connection
        self.total_opened += 1
        connection.start(ack(connection.connection_id))

        self.logger.info(
            "SSE connection created",
            connection_id=connection.connection_id,
            route=route,
            interval=interval,
            total_connections=len(self.connections),
        )

        async def event_generator() -> AsyncIterator[str]:
            """Generate SSE events."""
            try:
                async for frame in connection.frames():
                    yield frame
            finally:
                self.release(connection, "client_disconnected")

        return StreamingResponse(
            event_generator(),
            media_type="text/event-stream",
            headers={**SSE_HEADERS, "X-Connection-ID": connection.connection_id},
            # Runs once the transport is done, even if the body was never iterated
            background=BackgroundTask(self._finalize, connection, "stream_ended"),
        )

    def release(self, connection: SSEConnection, reason: str) -> None:
        """Close a connection and forget it. Safe to call more than once."""
        connection.close(reason)
        self.connections.pop(connection.connection_id, None)

    async def _finalize(self, connection: SSEConnection, reason: str) -> None:
        # Must run on the event loop thread
        self.release(connection, reason)

    async def close_all(self, reason: str = "server_shutdown") -> int:
        """
        Close every live connection.

        Returns:
            Number of connections closed
        """
        connections = list(self.connections.values())
        for connection in connections:
            self.release(connection, reason)
        if connections:
            self.logger.info("Closed all SSE connections", count=len(connections), reason=reason)
        return len(connections)

    def get_stats(self) -> SSEConnectionStats:
        """Get connection statistics."""
        by_route = Counter(c.route for c in self.connections.values())
        return SSEConnectionStats(
            total_connections=len(self.connections),
            connections_by_route=dict(by_route),
            total_opened=self.total_opened,
        )
