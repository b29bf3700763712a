"""Connection registry: session id -> live websocket with an ordered outbox.

Each session owns one FIFO queue drained by one writer task, so events for a
session leave in exactly the order the room operations produced them and
each is written once. Enqueueing never awaits, which lets a handler mutate
the room store and queue every resulting event in one uninterrupted step.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
import logging
from typing import Any
import uuid

from meetroom.rooms.effects import Close
from meetroom.rooms.effects import Effect
from meetroom.rooms.effects import Send

from .protocol import ServerEvent
from .protocol import ws_send_event

logger = logging.getLogger(__name__)


class SessionConnection:
    """One accepted websocket and its outbound queue."""

    def __init__(self, session_id: str, websocket: Any) -> None:
        self.session_id = session_id
        self.websocket = websocket
        self._outbox: asyncio.Queue[Effect | None] = asyncio.Queue()
        self._writer_task: asyncio.Task[None] | None = None
        self._closing = False

    @property
    def closing(self) -> bool:
        return self._closing

    def start(self) -> None:
        if self._writer_task is None:
            self._writer_task = asyncio.create_task(self._drain())

    def enqueue(self, effect: Effect) -> None:
        if self._closing:
            return
        if isinstance(effect, Close):
            self._closing = True
        self._outbox.put_nowait(effect)

    def send(self, event: ServerEvent, payload: dict[str, Any]) -> None:
        self.enqueue(Send(self.session_id, event, payload))

    def close(self, *, code: int = 1000, reason: str = "") -> None:
        self.enqueue(Close(self.session_id, code, reason))

    async def stop(self) -> None:
        """Flush what is queued, then end the writer task."""
        self._closing = True
        self._outbox.put_nowait(None)
        if self._writer_task is not None:
            await self._writer_task

    async def _drain(self) -> None:
        while True:
            effect = await self._outbox.get()
            if effect is None:
                return
            try:
                if isinstance(effect, Close):
                    await self.websocket.close(code=effect.code, reason=effect.reason)
                    return
                await ws_send_event(self.websocket, effect.event, effect.payload)
            except Exception:
                logger.warning("send to session %s failed; dropping its outbox", self.session_id, exc_info=True)
                self._closing = True
                return


class ConnectionRegistry:
    """Live sessions of this process, keyed by transport-assigned session id."""

    def __init__(self) -> None:
        self._connections: dict[str, SessionConnection] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def register(self, websocket: Any, *, session_id: str | None = None) -> SessionConnection:
        session_id = session_id or uuid.uuid4().hex
        connection = SessionConnection(session_id, websocket)
        self._connections[session_id] = connection
        connection.start()
        return connection

    def deliver(self, effects: Iterable[Effect]) -> None:
        """Queue effects on their sessions' outboxes; unknown sessions are skipped."""
        for effect in effects:
            connection = self._connections.get(effect.session_id)
            if connection is None:
                logger.debug("dropping %s for unknown session %s", type(effect).__name__, effect.session_id)
                continue
            connection.enqueue(effect)

    async def unregister(self, session_id: str) -> None:
        connection = self._connections.pop(session_id, None)
        if connection is not None:
            await connection.stop()

    async def aclose(self) -> None:
        for session_id in list(self._connections):
            await self.unregister(session_id)
