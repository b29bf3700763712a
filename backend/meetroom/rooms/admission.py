"""Join handling: create a room, queue into its lobby, or refuse bad credentials."""

from __future__ import annotations

import logging

from meetroom.rooms.effects import Effect
from meetroom.rooms.effects import Send
from meetroom.rooms.membership import broadcast_participants
from meetroom.rooms.registry import DEFAULT_GUEST_NAME
from meetroom.rooms.registry import DEFAULT_HOST_NAME
from meetroom.rooms.registry import BadCredentialsError
from meetroom.rooms.registry import RoomStore
from meetroom.rooms.registry import SessionBusyError
from meetroom.rooms.views import lobby_snapshot
from meetroom.ws.protocol import ServerEvent

logger = logging.getLogger(__name__)

LOBBY_WAIT_MESSAGE = "Waiting for host to admit you..."
BAD_PASSWORD_MESSAGE = "Incorrect room password."


def join(
    store: RoomStore,
    session_id: str,
    *,
    room_id: str | None,
    username: str | None = None,
    password: str | None = None,
) -> list[Effect]:
    """Admit ``session_id`` into ``room_id``.

    The first joiner of an unknown room id creates it and becomes host.
    Later joiners wait in the lobby for the host's decision.
    """
    if not room_id:
        logger.debug("join ignored: session %s sent no room id", session_id)
        return []

    with store.lock():
        if not store.has_room(room_id):
            return _create_room(store, session_id, room_id=room_id, username=username, password=password)

        try:
            room = store.enqueue(
                room_id,
                session_id=session_id,
                name=username or DEFAULT_GUEST_NAME,
                password=password,
            )
        except SessionBusyError:
            logger.debug("join ignored: session %s already in a room", session_id)
            return []
        except BadCredentialsError:
            logger.info("join refused: bad password for room %s from %s", room_id, session_id)
            return [Send(session_id, ServerEvent.JOIN_ERROR, {"message": BAD_PASSWORD_MESSAGE})]

        logger.info("session %s waiting in lobby of room %s", session_id, room_id)
        return [
            Send(session_id, ServerEvent.LOBBY_WAIT, {"message": LOBBY_WAIT_MESSAGE}),
            Send(room.host_id, ServerEvent.LOBBY_UPDATE, lobby_snapshot(room)),
        ]


def _create_room(
    store: RoomStore,
    session_id: str,
    *,
    room_id: str,
    username: str | None,
    password: str | None,
) -> list[Effect]:
    try:
        store.create_room(
            room_id,
            host_id=session_id,
            host_name=username or DEFAULT_HOST_NAME,
            password=password,
        )
    except SessionBusyError:
        logger.debug("join ignored: session %s already in a room", session_id)
        return []

    logger.info("room %s created by host %s", room_id, session_id)
    effects: list[Effect] = [
        Send(session_id, ServerEvent.JOINED_ROOM, {"roomId": room_id, "isHost": True}),
        Send(session_id, ServerEvent.ALL_USERS, {"users": []}),
    ]
    effects.extend(broadcast_participants(store, room_id))
    return effects
