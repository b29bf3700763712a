"""Room fan-out of chat, file shares, whiteboard strokes and captions.

None of these are stored. Chat, files and captions must come from an
admitted member and carry the sender's display name; whiteboard events are
relayed to the room as-is from any session.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from datetime import timezone
import logging
from typing import Any

from meetroom.rooms.effects import Effect
from meetroom.rooms.effects import send_to_many
from meetroom.rooms.registry import NotMemberError
from meetroom.rooms.registry import RoomMember
from meetroom.rooms.registry import RoomNotFoundError
from meetroom.rooms.registry import RoomStore
from meetroom.ws.protocol import ServerEvent

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _sender(store: RoomStore, room_id: str | None, session_id: str) -> RoomMember | None:
    if not room_id:
        return None
    try:
        return store.require_member(room_id, session_id)
    except (RoomNotFoundError, NotMemberError) as exc:
        logger.debug("room event ignored: %s", exc)
        return None


def _fan_out(
    store: RoomStore,
    session_id: str,
    room_id: str | None,
    event: ServerEvent,
    build_payload: Callable[[RoomMember], dict[str, Any]],
    *,
    include_sender: bool,
) -> list[Effect]:
    with store.lock():
        sender = _sender(store, room_id, session_id)
        if sender is None:
            return []
        room = store.get_room(room_id)
        recipients = room.member_ids() if include_sender else room.member_ids(exclude=session_id)
        return send_to_many(recipients, event, build_payload(sender))


def chat_message(store: RoomStore, session_id: str, *, room_id: str | None, message: str) -> list[Effect]:
    return _fan_out(
        store,
        session_id,
        room_id,
        ServerEvent.CHAT_MESSAGE,
        lambda sender: {"from": sender.name, "message": message, "time": _utc_now_iso()},
        include_sender=True,
    )


def file_share(
    store: RoomStore,
    session_id: str,
    *,
    room_id: str | None,
    file_name: str,
    file_data_url: str,
    mime_type: str,
    max_bytes: int,
) -> list[Effect]:
    if len(file_data_url) > max_bytes:
        logger.warning(
            "file share %r from %s dropped: %d bytes exceeds limit %d",
            file_name,
            session_id,
            len(file_data_url),
            max_bytes,
        )
        return []
    return _fan_out(
        store,
        session_id,
        room_id,
        ServerEvent.FILE_SHARE,
        lambda sender: {
            "from": sender.name,
            "fileName": file_name,
            "fileDataUrl": file_data_url,
            "mimeType": mime_type,
            "time": _utc_now_iso(),
        },
        include_sender=True,
    )


def _relay_to_room(
    store: RoomStore, session_id: str, room_id: str | None, event: ServerEvent, payload: dict[str, Any]
) -> list[Effect]:
    if not room_id:
        return []
    with store.lock():
        if not store.has_room(room_id):
            return []
        room = store.get_room(room_id)
        return send_to_many(room.member_ids(exclude=session_id), event, payload)


def whiteboard_draw(store: RoomStore, session_id: str, *, room_id: str | None, line: dict[str, float]) -> list[Effect]:
    return _relay_to_room(store, session_id, room_id, ServerEvent.WHITEBOARD_DRAW, {"line": line})


def whiteboard_clear(store: RoomStore, session_id: str, *, room_id: str | None) -> list[Effect]:
    return _relay_to_room(store, session_id, room_id, ServerEvent.WHITEBOARD_CLEAR, {})


def caption_update(store: RoomStore, session_id: str, *, room_id: str | None, text: str) -> list[Effect]:
    return _fan_out(
        store,
        session_id,
        room_id,
        ServerEvent.CAPTION_UPDATE,
        lambda sender: {"from": sender.name, "text": text},
        include_sender=False,
    )
