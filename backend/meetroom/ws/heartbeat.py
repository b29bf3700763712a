"""WebSocket heartbeat and message-loop utilities."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime
from datetime import timezone
import logging
from typing import Any

from .connections import SessionConnection
from .protocol import ClientEvent
from .protocol import Ping
from .protocol import Pong
from .protocol import ProtocolError
from .protocol import ServerEvent
from .protocol import parse_client_message

logger = logging.getLogger(__name__)

HEARTBEAT_TIMEOUT_CLOSE = (4408, "HEARTBEAT_TIMEOUT")


class HeartbeatState:
    """Track one websocket heartbeat ping/pong lifecycle."""

    def __init__(self) -> None:
        self.last_ping_at: float | None = None
        self.last_pong_at: float | None = None
        self.missed_pong_count = 0
        self._awaiting_pong = False
        self._pong_event = asyncio.Event()

    def mark_ping_sent(self) -> None:
        self.last_ping_at = datetime.now(timezone.utc).timestamp()
        self._awaiting_pong = True
        self._pong_event.clear()

    def mark_pong_received(self) -> None:
        self.last_pong_at = datetime.now(timezone.utc).timestamp()
        if not self._awaiting_pong:
            return
        self._awaiting_pong = False
        self.missed_pong_count = 0
        self._pong_event.set()

    async def wait_for_pong(self, *, timeout_seconds: float) -> bool:
        if not self._awaiting_pong:
            return True
        try:
            await asyncio.wait_for(self._pong_event.wait(), timeout=timeout_seconds)
        except asyncio.TimeoutError:
            self._awaiting_pong = False
            self.missed_pong_count += 1
            return False
        return True


def handle_ws_message(
    *,
    connection: SessionConnection,
    heartbeat_state: HeartbeatState,
    message: str,
    on_event: Callable[[ClientEvent], None],
) -> None:
    try:
        event = parse_client_message(message)
    except ProtocolError as exc:
        logger.debug("ignoring malformed frame from %s: %s", connection.session_id, exc)
        return

    if isinstance(event, Ping):
        connection.send(ServerEvent.PONG, {})
        return
    if isinstance(event, Pong):
        heartbeat_state.mark_pong_received()
        return
    on_event(event)


async def heartbeat_loop(
    connection: SessionConnection,
    *,
    heartbeat_state: HeartbeatState,
    interval_seconds: float = 30.0,
    pong_timeout_seconds: float = 10.0,
    max_missed_pongs: int = 2,
) -> None:
    sleep_before_probe = max(interval_seconds - pong_timeout_seconds, 0.0)
    while not connection.closing:
        await asyncio.sleep(sleep_before_probe)
        connection.send(ServerEvent.PING, {})
        heartbeat_state.mark_ping_sent()
        pong_received = await heartbeat_state.wait_for_pong(timeout_seconds=pong_timeout_seconds)
        if (not pong_received) and heartbeat_state.missed_pong_count >= max_missed_pongs:
            logger.info("session %s missed %d pongs; closing", connection.session_id, heartbeat_state.missed_pong_count)
            code, reason = HEARTBEAT_TIMEOUT_CLOSE
            connection.close(code=code, reason=reason)
            return


async def ws_message_loop(
    websocket: Any,
    *,
    connection: SessionConnection,
    on_event: Callable[[ClientEvent], None],
    interval_seconds: float = 30.0,
    pong_timeout_seconds: float = 10.0,
    max_missed_pongs: int = 2,
) -> None:
    heartbeat_state = HeartbeatState()
    heartbeat_task = asyncio.create_task(
        heartbeat_loop(
            connection,
            heartbeat_state=heartbeat_state,
            interval_seconds=interval_seconds,
            pong_timeout_seconds=pong_timeout_seconds,
            max_missed_pongs=max_missed_pongs,
        )
    )
    try:
        while True:
            # Raw receive keeps draining after a server-side close until the client hangs up.
            raw = await websocket.receive()
            if raw["type"] == "websocket.disconnect":
                return
            message = raw.get("text")
            if message is None:
                continue
            handle_ws_message(
                connection=connection,
                heartbeat_state=heartbeat_state,
                message=message,
                on_event=on_event,
            )
    finally:
        heartbeat_task.cancel()
        try:
            await heartbeat_task
        except asyncio.CancelledError:
            pass
