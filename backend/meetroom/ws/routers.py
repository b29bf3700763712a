"""WebSocket route handler for the meeting channel."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi import WebSocket

from meetroom.rooms.membership import reconcile_disconnect
from meetroom.runtime import runtime_from_app

from .dispatch import handle_event
from .heartbeat import ws_message_loop
from .protocol import ClientEvent
from .protocol import ServerEvent

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def ws_meeting(websocket: WebSocket) -> None:
    """Meeting websocket: announce the session id, then apply room events until disconnect."""
    runtime = runtime_from_app(websocket.app)
    settings = runtime.settings

    await websocket.accept()
    connection = runtime.connections.register(websocket)
    session_id = connection.session_id
    logger.info("session %s connected", session_id)
    connection.send(ServerEvent.CONNECTED, {"sessionId": session_id})

    def on_event(event: ClientEvent) -> None:
        effects = handle_event(runtime.store, settings, session_id, event)
        runtime.connections.deliver(effects)

    try:
        await ws_message_loop(
            websocket,
            connection=connection,
            on_event=on_event,
            interval_seconds=settings.meetroom_heartbeat_interval_seconds,
            pong_timeout_seconds=settings.meetroom_pong_timeout_seconds,
            max_missed_pongs=settings.meetroom_max_missed_pongs,
        )
    finally:
        runtime.connections.deliver(reconcile_disconnect(runtime.store, session_id))
        await runtime.connections.unregister(session_id)
        logger.info("session %s disconnected", session_id)
