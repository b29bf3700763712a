"""Route typed client events to room and signaling operations."""

from __future__ import annotations

from collections.abc import Callable
import logging

from meetroom.core.config import Settings
from meetroom.rooms import admission
from meetroom.rooms import collab
from meetroom.rooms import host_controls
from meetroom.rooms import lobby
from meetroom.rooms.effects import Effect
from meetroom.rooms.registry import RoomStore
from meetroom.signaling import relay

from . import protocol
from .protocol import ClientEvent

logger = logging.getLogger(__name__)

Handler = Callable[[RoomStore, Settings, str, ClientEvent], list[Effect]]


def _join_room(store: RoomStore, _: Settings, session_id: str, event: protocol.JoinRoom) -> list[Effect]:
    payload = event.payload
    return admission.join(
        store,
        session_id,
        room_id=payload.room_id,
        username=payload.username,
        password=payload.password,
    )


def _approve_user(store: RoomStore, _: Settings, session_id: str, event: protocol.ApproveUser) -> list[Effect]:
    return lobby.approve(store, session_id, room_id=event.payload.room_id, user_id=event.payload.user_id)


def _reject_user(store: RoomStore, _: Settings, session_id: str, event: protocol.RejectUser) -> list[Effect]:
    return lobby.reject(store, session_id, room_id=event.payload.room_id, user_id=event.payload.user_id)


def _sending_signal(_store: RoomStore, _: Settings, _session_id: str, event: protocol.SendingSignal) -> list[Effect]:
    payload = event.payload
    return relay.relay_offer(target_id=payload.user_to_signal, caller_id=payload.caller_id, signal=payload.signal)


def _returning_signal(
    _store: RoomStore, _: Settings, session_id: str, event: protocol.ReturningSignal
) -> list[Effect]:
    payload = event.payload
    return relay.relay_answer(sender_id=session_id, caller_id=payload.caller_id, signal=payload.signal)


def _chat_message(store: RoomStore, _: Settings, session_id: str, event: protocol.ChatMessage) -> list[Effect]:
    return collab.chat_message(store, session_id, room_id=event.payload.room_id, message=event.payload.message)


def _file_share(store: RoomStore, settings: Settings, session_id: str, event: protocol.FileShare) -> list[Effect]:
    payload = event.payload
    return collab.file_share(
        store,
        session_id,
        room_id=payload.room_id,
        file_name=payload.file_name,
        file_data_url=payload.file_data_url,
        mime_type=payload.mime_type,
        max_bytes=settings.meetroom_max_file_share_bytes,
    )


def _whiteboard_draw(store: RoomStore, _: Settings, session_id: str, event: protocol.WhiteboardDraw) -> list[Effect]:
    line = event.payload.line.model_dump()
    return collab.whiteboard_draw(store, session_id, room_id=event.payload.room_id, line=line)


def _whiteboard_clear(store: RoomStore, _: Settings, session_id: str, event: protocol.WhiteboardClear) -> list[Effect]:
    return collab.whiteboard_clear(store, session_id, room_id=event.payload.room_id)


def _caption_update(store: RoomStore, _: Settings, session_id: str, event: protocol.CaptionUpdate) -> list[Effect]:
    return collab.caption_update(store, session_id, room_id=event.payload.room_id, text=event.payload.text)


def _host_mute_user(store: RoomStore, _: Settings, session_id: str, event: protocol.HostMuteUser) -> list[Effect]:
    payload = event.payload
    return host_controls.force_mute(
        store,
        session_id,
        room_id=payload.room_id,
        user_id=payload.user_id,
        kind=payload.type,
    )


def _remove_user(store: RoomStore, _: Settings, session_id: str, event: protocol.RemoveUser) -> list[Effect]:
    return host_controls.remove_user(store, session_id, room_id=event.payload.room_id, user_id=event.payload.user_id)


def _heartbeat(_store: RoomStore, _: Settings, _session_id: str, _event: ClientEvent) -> list[Effect]:
    # PING/PONG are answered by the heartbeat loop before dispatch.
    return []


HANDLERS: dict[type[ClientEvent], Handler] = {
    protocol.JoinRoom: _join_room,
    protocol.ApproveUser: _approve_user,
    protocol.RejectUser: _reject_user,
    protocol.SendingSignal: _sending_signal,
    protocol.ReturningSignal: _returning_signal,
    protocol.ChatMessage: _chat_message,
    protocol.FileShare: _file_share,
    protocol.WhiteboardDraw: _whiteboard_draw,
    protocol.WhiteboardClear: _whiteboard_clear,
    protocol.CaptionUpdate: _caption_update,
    protocol.HostMuteUser: _host_mute_user,
    protocol.RemoveUser: _remove_user,
    protocol.Ping: _heartbeat,
    protocol.Pong: _heartbeat,
}

_unhandled = set(protocol.inbound_event_types()) - set(HANDLERS)
if _unhandled:
    raise RuntimeError(f"inbound events without handler: {sorted(cls.__name__ for cls in _unhandled)}")


def handle_event(store: RoomStore, settings: Settings, session_id: str, event: ClientEvent) -> list[Effect]:
    """Apply one client event to the store and return the effects to deliver."""
    handler = HANDLERS[type(event)]
    return handler(store, settings, session_id, event)
