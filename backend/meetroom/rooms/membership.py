"""Membership snapshots and disconnect reconciliation."""

from __future__ import annotations

import logging

from meetroom.rooms.effects import Effect
from meetroom.rooms.effects import send_to_many
from meetroom.rooms.registry import RoomStore
from meetroom.rooms.views import participants_snapshot
from meetroom.ws.protocol import ServerEvent

logger = logging.getLogger(__name__)


def broadcast_participants(store: RoomStore, room_id: str) -> list[Effect]:
    """Publish ``{users, hostId}`` to every member; nothing if the room is gone."""
    with store.lock():
        if not store.has_room(room_id):
            return []
        room = store.get_room(room_id)
        return send_to_many(room.member_ids(), ServerEvent.PARTICIPANTS_UPDATE, participants_snapshot(room))


def reconcile_disconnect(store: RoomStore, session_id: str) -> list[Effect]:
    """Drop a lost session from its room and notify whoever is left.

    A departing host ends the room for everyone: members and still-waiting
    lobby entries get ``room-ended`` and the room is deleted with no
    successor host.
    """
    with store.lock():
        departure = store.discard_session(session_id)
        if departure is None:
            return []

        room = departure.room
        effects: list[Effect] = []
        if departure.member is not None:
            effects.extend(send_to_many(room.member_ids(), ServerEvent.USER_LEFT, {"sessionId": session_id}))

        if departure.room_closed:
            logger.info("room %s ended: host %s disconnected", room.room_id, session_id)
            effects.extend(send_to_many(room.member_ids(), ServerEvent.ROOM_ENDED, {}))
            effects.extend(send_to_many(list(room.lobby), ServerEvent.ROOM_ENDED, {}))
            return effects

        if departure.member is not None or departure.lobby_entry is not None:
            effects.extend(broadcast_participants(store, room.room_id))
        return effects
