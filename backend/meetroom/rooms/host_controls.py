"""Host-only moderation: force-mute and removal."""

from __future__ import annotations

import logging

from meetroom.rooms.effects import CLOSE_REMOVED_BY_HOST
from meetroom.rooms.effects import Effect
from meetroom.rooms.effects import Send
from meetroom.rooms.effects import close_with
from meetroom.rooms.effects import send_to_many
from meetroom.rooms.membership import broadcast_participants
from meetroom.rooms.registry import HostProtectedError
from meetroom.rooms.registry import NotHostError
from meetroom.rooms.registry import NotMemberError
from meetroom.rooms.registry import RoomNotFoundError
from meetroom.rooms.registry import RoomStore
from meetroom.ws.protocol import ServerEvent

logger = logging.getLogger(__name__)

MUTE_KINDS = frozenset({"audio", "video"})

_IGNORED = (RoomNotFoundError, NotHostError, NotMemberError, HostProtectedError)


def force_mute(
    store: RoomStore,
    session_id: str,
    *,
    room_id: str | None,
    user_id: str | None,
    kind: str,
) -> list[Effect]:
    """Ask a member's client to disable its audio or video track."""
    if not room_id or not user_id or kind not in MUTE_KINDS:
        return []

    with store.lock():
        try:
            store.require_host(room_id, session_id)
            store.require_member(room_id, user_id)
        except _IGNORED as exc:
            logger.debug("force-mute ignored: %s", exc)
            return []

    return [Send(user_id, ServerEvent.FORCE_MUTE, {"type": kind})]


def remove_user(store: RoomStore, session_id: str, *, room_id: str | None, user_id: str | None) -> list[Effect]:
    """Evict a member: notify and close it, then tell the rest of the room."""
    if not room_id or not user_id:
        return []

    with store.lock():
        try:
            store.remove_member(room_id, actor_id=session_id, session_id=user_id)
        except _IGNORED as exc:
            logger.debug("remove-user ignored: %s", exc)
            return []

        room = store.get_room(room_id)
        logger.info("session %s removed from room %s by host", user_id, room_id)
        effects: list[Effect] = [
            Send(user_id, ServerEvent.REMOVED_BY_HOST, {}),
            close_with(user_id, CLOSE_REMOVED_BY_HOST),
        ]
        effects.extend(send_to_many(room.member_ids(), ServerEvent.USER_LEFT, {"sessionId": user_id}))
        effects.extend(broadcast_participants(store, room_id))
        return effects
