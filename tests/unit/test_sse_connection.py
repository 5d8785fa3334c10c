"""
Unit Tests for SSE Connections
==============================

Frame formatting, the connection state machine and the connection manager's
stream lifecycle. Streams are driven through the response body iterator with
millisecond intervals.
"""

import asyncio
import json

import pytest
from fastapi.responses import StreamingResponse

from ads_gateway.api.sse.connection_manager import SSEConnection, SSEConnectionManager
from ads_gateway.api.sse.events import (
    connected_payload,
    format_sse_event,
    heartbeat_payload,
    time_payload,
    tool_ack_payload,
)
from ads_gateway.api.sse.models import SSEConnectionState
from ads_gateway.core.errors import TooManyConnectionsError

INTERVAL = 0.02


def parse_frame(frame: str) -> dict:
    assert frame.startswith("data: ")
    assert frame.endswith("\n\n")
    return json.loads(frame[len("data: "):])


async def next_frame(iterator, timeout: float = 1.0) -> str:
    return await asyncio.wait_for(iterator.__anext__(), timeout)


class TestFormatSSEEvent:
    def test_data_only_frame(self):
        assert format_sse_event({"message": "connected"}) == 'data: {"message":"connected"}\n\n'

    def test_payloads(self):
        assert connected_payload() == {"message": "connected"}
        assert time_payload()["time"].endswith("Z")
        assert heartbeat_payload()["type"] == "heartbeat"
        assert tool_ack_payload("abc", ["get_campaigns"]) == {
            "type": "connection_ack",
            "connectionId": "abc",
            "tools": ["get_campaigns"],
        }


class TestSSEConnection:
    @pytest.mark.asyncio
    async def test_ack_precedes_ticks(self):
        connection = SSEConnection(route="/sse", interval=INTERVAL, tick=time_payload)
        connection.start(connected_payload())
        frames = connection.frames()

        try:
            assert parse_frame(await next_frame(frames)) == {"message": "connected"}
            for _ in range(3):
                assert "time" in parse_frame(await next_frame(frames))
        finally:
            connection.close()

        assert connection.events_sent >= 4

    @pytest.mark.asyncio
    async def test_ack_written_before_timer_runs(self):
        connection = SSEConnection(route="/sse", interval=INTERVAL, tick=time_payload)
        connection.start(connected_payload())

        # Nothing has yielded to the event loop yet
        assert connection.events_sent == 1
        connection.close()

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        connection = SSEConnection(route="/sse", interval=INTERVAL, tick=time_payload)
        connection.start(connected_payload())

        assert connection.close("client_disconnected") is True
        assert connection.close("again") is False
        assert connection.state is SSEConnectionState.CLOSED
        assert connection.close_reason == "client_disconnected"

    @pytest.mark.asyncio
    async def test_no_writes_after_close(self):
        connection = SSEConnection(route="/sse", interval=INTERVAL, tick=time_payload)
        connection.start(connected_payload())
        await asyncio.sleep(INTERVAL * 2.5)

        connection.close()
        sent_at_close = connection.events_sent
        await asyncio.sleep(INTERVAL * 5)

        assert connection.events_sent == sent_at_close
        assert connection.write({"late": True}) is False
        assert connection._timer.done()

        # Only the end-of-stream signal remains
        frames = [frame async for frame in connection.frames()]
        assert frames == []


class TestSSEConnectionManager:
    @pytest.mark.asyncio
    async def test_open_stream_response(self, sse_manager):
        response = await sse_manager.open_stream(
            route="/sse", interval=INTERVAL, ack=lambda cid: connected_payload(), tick=time_payload
        )

        assert isinstance(response, StreamingResponse)
        assert response.media_type == "text/event-stream"
        assert response.headers["cache-control"] == "no-cache"
        assert response.headers["connection"] == "keep-alive"
        connection_id = response.headers["x-connection-id"]
        assert connection_id in sse_manager.connections

        await sse_manager.close_all()

    @pytest.mark.asyncio
    async def test_stream_lifecycle(self, sse_manager):
        response = await sse_manager.open_stream(
            route="/v1/tools",
            interval=INTERVAL,
            ack=lambda cid: tool_ack_payload(cid, ["get_campaigns"]),
            tick=heartbeat_payload,
        )
        connection_id = response.headers["x-connection-id"]
        connection = sse_manager.connections[connection_id]
        body = response.body_iterator

        ack = parse_frame(await next_frame(body))
        assert ack["type"] == "connection_ack"
        assert ack["connectionId"] == connection_id
        assert parse_frame(await next_frame(body))["type"] == "heartbeat"

        # Client goes away
        await body.aclose()

        assert connection.state is SSEConnectionState.CLOSED
        assert connection_id not in sse_manager.connections
        sent = connection.events_sent
        await asyncio.sleep(INTERVAL * 3)
        assert connection.events_sent == sent

    @pytest.mark.asyncio
    async def test_background_release(self, sse_manager):
        response = await sse_manager.open_stream(
            route="/sse", interval=INTERVAL, ack=lambda cid: connected_payload(), tick=time_payload
        )
        connection_id = response.headers["x-connection-id"]

        await response.background()

        assert connection_id not in sse_manager.connections

    @pytest.mark.asyncio
    async def test_connection_limit(self):
        manager = SSEConnectionManager(max_connections=1)
        await manager.open_stream(
            route="/sse", interval=INTERVAL, ack=lambda cid: connected_payload(), tick=time_payload
        )

        with pytest.raises(TooManyConnectionsError) as exc_info:
            await manager.open_stream(
                route="/sse",
                interval=INTERVAL,
                ack=lambda cid: connected_payload(),
                tick=time_payload,
            )
        assert exc_info.value.status_code == 503

        assert await manager.close_all() == 1

    @pytest.mark.asyncio
    async def test_stats(self, sse_manager):
        for route in ("/sse", "/sse", "/v1/tools"):
            await sse_manager.open_stream(
                route=route, interval=INTERVAL, ack=lambda cid: {}, tick=heartbeat_payload
            )

        stats = sse_manager.get_stats()
        assert stats.total_connections == 3
        assert stats.connections_by_route == {"/sse": 2, "/v1/tools": 1}
        assert stats.total_opened == 3

        assert await sse_manager.close_all() == 3
        assert sse_manager.get_stats().total_connections == 0
