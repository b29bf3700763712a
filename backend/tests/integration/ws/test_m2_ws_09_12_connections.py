"""M2-WS-09~12 per-session outbox ordering and heartbeat contract tests."""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Any

from meetroom.rooms.effects import Close
from meetroom.rooms.effects import Send
from meetroom.ws import protocol
from meetroom.ws.connections import ConnectionRegistry
from meetroom.ws.heartbeat import ws_message_loop
from meetroom.ws.protocol import ServerEvent


class _FakeWebSocket:
    def __init__(self) -> None:
        self.close_code: int | None = None
        self.close_reason: str | None = None
        self.sent_messages: list[dict[str, Any]] = []

        self._closed_event = asyncio.Event()
        self._inbound_event = asyncio.Event()
        self._disconnected = False
        self._inbound_texts: deque[str] = deque()

    async def send_json(self, payload: Any) -> None:
        self.sent_messages.append(payload)

    async def close(self, *, code: int = 1000, reason: str | None = None) -> None:
        self.close_code = code
        self.close_reason = reason
        self._closed_event.set()

    async def receive(self) -> dict[str, Any]:
        while not self._inbound_texts:
            if self._disconnected:
                return {"type": "websocket.disconnect", "code": 1000}
            self._inbound_event.clear()
            await self._inbound_event.wait()
        return {"type": "websocket.receive", "text": self._inbound_texts.popleft()}

    async def wait_closed(self) -> None:
        await self._closed_event.wait()

    def push_text(self, text: str) -> None:
        self._inbound_texts.append(text)
        self._inbound_event.set()

    def disconnect(self) -> None:
        self._disconnected = True
        self._inbound_event.set()

    def sent_types(self) -> list[str]:
        return [message["type"] for message in self.sent_messages]


def test_m2_ws_09_outbox_preserves_order_and_stops_at_close() -> None:
    """Contract: effects leave in delivery order; nothing follows a close."""

    async def _run() -> _FakeWebSocket:
        websocket = _FakeWebSocket()
        registry = ConnectionRegistry()
        registry.register(websocket, session_id="s1")

        registry.deliver(
            [
                Send("s1", ServerEvent.JOIN_ERROR, {"message": "Host rejected your request."}),
                Send("ghost", ServerEvent.USER_LEFT, {"sessionId": "x"}),
                Close("s1", 4403, "LOBBY_REJECTED"),
                Send("s1", ServerEvent.CHAT_MESSAGE, {"message": "too late"}),
            ]
        )
        await registry.unregister("s1")
        return websocket

    websocket = asyncio.run(_run())

    assert websocket.sent_types() == ["join-error"]
    assert (websocket.close_code, websocket.close_reason) == (4403, "LOBBY_REJECTED")


def test_m2_ws_10_registry_assigns_unique_session_ids() -> None:
    """Contract: every accepted socket gets a distinct, opaque session id."""

    async def _run() -> list[str]:
        registry = ConnectionRegistry()
        ids = [registry.register(_FakeWebSocket()).session_id for _ in range(5)]
        assert len(registry) == 5
        await registry.aclose()
        assert len(registry) == 0
        return ids

    ids = asyncio.run(_run())

    assert len(set(ids)) == 5


def test_m2_ws_11_message_loop_answers_ping_and_dispatches_events() -> None:
    """Contract: PING gets PONG without dispatch; room events reach the handler in order."""

    async def _run() -> tuple[_FakeWebSocket, list[Any]]:
        websocket = _FakeWebSocket()
        registry = ConnectionRegistry()
        connection = registry.register(websocket, session_id="s1")
        events: list[Any] = []

        websocket.push_text("PING")
        websocket.push_text('{"v":1,"type":"join-room","payload":{"roomId":"r1"}}')
        websocket.push_text("garbage")
        websocket.push_text('{"v":1,"type":"whiteboard-clear","payload":{"roomId":"r1"}}')
        websocket.disconnect()

        await asyncio.wait_for(
            ws_message_loop(websocket, connection=connection, on_event=events.append, interval_seconds=60),
            timeout=1.0,
        )
        await registry.unregister("s1")
        return websocket, events

    websocket, events = asyncio.run(_run())

    assert websocket.sent_types() == ["PONG"]
    assert [type(event) for event in events] == [protocol.JoinRoom, protocol.WhiteboardClear]
    assert events[0].payload.room_id == "r1"


def test_m2_ws_12_missed_pongs_close_the_session() -> None:
    """Contract: a client that never answers PING is closed with 4408."""

    async def _run() -> _FakeWebSocket:
        websocket = _FakeWebSocket()
        registry = ConnectionRegistry()
        connection = registry.register(websocket, session_id="s1")

        loop_task = asyncio.create_task(
            ws_message_loop(
                websocket,
                connection=connection,
                on_event=lambda _event: None,
                interval_seconds=0.05,
                pong_timeout_seconds=0.02,
                max_missed_pongs=1,
            )
        )
        await asyncio.wait_for(websocket.wait_closed(), timeout=2.0)
        websocket.disconnect()
        await asyncio.wait_for(loop_task, timeout=1.0)
        await registry.unregister("s1")
        return websocket

    websocket = asyncio.run(_run())

    assert websocket.sent_types() == ["PING"]
    assert (websocket.close_code, websocket.close_reason) == (4408, "HEARTBEAT_TIMEOUT")
