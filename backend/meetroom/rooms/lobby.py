"""Host decisions on lobby entries."""

from __future__ import annotations

import logging

from meetroom.rooms.effects import CLOSE_LOBBY_REJECTED
from meetroom.rooms.effects import Effect
from meetroom.rooms.effects import Send
from meetroom.rooms.effects import close_with
from meetroom.rooms.membership import broadcast_participants
from meetroom.rooms.registry import LobbyEntryNotFoundError
from meetroom.rooms.registry import NotHostError
from meetroom.rooms.registry import RoomNotFoundError
from meetroom.rooms.registry import RoomStore
from meetroom.rooms.views import lobby_snapshot
from meetroom.ws.protocol import ServerEvent

logger = logging.getLogger(__name__)

REJECTED_MESSAGE = "Host rejected your request."

_IGNORED = (RoomNotFoundError, NotHostError, LobbyEntryNotFoundError)


def approve(store: RoomStore, session_id: str, *, room_id: str | None, user_id: str | None) -> list[Effect]:
    """Admit a waiting session as a non-host member.

    The joiner gets ``joined-room`` and then the peer list before anything
    else about the room, so it can prepare peer connections before offers
    from existing members arrive.
    """
    if not room_id or not user_id:
        return []

    with store.lock():
        try:
            store.admit(room_id, actor_id=session_id, session_id=user_id)
        except _IGNORED as exc:
            logger.debug("approve ignored: %s", exc)
            return []

        room = store.get_room(room_id)
        logger.info("session %s admitted to room %s", user_id, room_id)
        effects: list[Effect] = [
            Send(user_id, ServerEvent.JOINED_ROOM, {"roomId": room_id, "isHost": False}),
            Send(user_id, ServerEvent.ALL_USERS, {"users": room.member_ids(exclude=user_id)}),
            Send(room.host_id, ServerEvent.LOBBY_UPDATE, lobby_snapshot(room)),
        ]
        effects.extend(broadcast_participants(store, room_id))
        return effects


def reject(store: RoomStore, session_id: str, *, room_id: str | None, user_id: str | None) -> list[Effect]:
    """Turn a waiting session away and close its connection."""
    if not room_id or not user_id:
        return []

    with store.lock():
        try:
            store.reject(room_id, actor_id=session_id, session_id=user_id)
        except _IGNORED as exc:
            logger.debug("reject ignored: %s", exc)
            return []

        room = store.get_room(room_id)
        logger.info("session %s rejected from room %s", user_id, room_id)
        return [
            Send(user_id, ServerEvent.JOIN_ERROR, {"message": REJECTED_MESSAGE}),
            close_with(user_id, CLOSE_LOBBY_REJECTED),
            Send(room.host_id, ServerEvent.LOBBY_UPDATE, lobby_snapshot(room)),
        ]
