"""WebSocket wire protocol: envelope helpers and typed client events."""

from __future__ import annotations

from enum import Enum
import json
from typing import Annotated
from typing import Any
from typing import Literal
from typing import Union
from typing import get_args

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import TypeAdapter
from pydantic import ValidationError
from pydantic.alias_generators import to_camel

WS_PROTOCOL_VERSION = 1


class ServerEvent(str, Enum):
    """Event types pushed from server to client."""

    CONNECTED = "connected"
    JOINED_ROOM = "joined-room"
    ALL_USERS = "all-users"
    JOIN_ERROR = "join-error"
    LOBBY_WAIT = "lobby-wait"
    LOBBY_UPDATE = "lobby-update"
    PARTICIPANTS_UPDATE = "participants-update"
    USER_JOINED = "user-joined"
    RECEIVING_RETURNED_SIGNAL = "receiving-returned-signal"
    USER_LEFT = "user-left"
    ROOM_ENDED = "room-ended"
    REMOVED_BY_HOST = "removed-by-host"
    FORCE_MUTE = "force-mute"
    CHAT_MESSAGE = "chat-message"
    FILE_SHARE = "file-share"
    WHITEBOARD_DRAW = "whiteboard-draw"
    WHITEBOARD_CLEAR = "whiteboard-clear"
    CAPTION_UPDATE = "caption-update"
    PING = "PING"
    PONG = "PONG"


def ws_event(event_type: str, payload: dict[str, Any]) -> dict[str, Any]:
    if isinstance(event_type, ServerEvent):
        event_type = event_type.value
    return {"v": WS_PROTOCOL_VERSION, "type": event_type, "payload": payload}


async def ws_send_event(websocket: Any, event_type: str, payload: dict[str, Any]) -> None:
    message = ws_event(event_type, payload)
    if hasattr(websocket, "send_json"):
        await websocket.send_json(message)
        return
    if hasattr(websocket, "send_text"):
        await websocket.send_text(json.dumps(message))


class ClientPayload(BaseModel):
    """Base for inbound payloads: camelCase on the wire, unknown keys ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class JoinRoomPayload(ClientPayload):
    room_id: str | None = None
    username: str | None = None
    password: str | None = None
    # Sent by clients but never trusted: hosts are whoever creates the room.
    is_host: bool = False


class LobbyDecisionPayload(ClientPayload):
    room_id: str | None = None
    user_id: str | None = None


class SendingSignalPayload(ClientPayload):
    user_to_signal: str | None = None
    caller_id: str | None = None
    signal: Any = None


class ReturningSignalPayload(ClientPayload):
    caller_id: str | None = None
    signal: Any = None


class ChatMessagePayload(ClientPayload):
    room_id: str | None = None
    message: str = ""


class FileSharePayload(ClientPayload):
    room_id: str | None = None
    file_name: str = ""
    file_data_url: str = ""
    mime_type: str = ""


class WhiteboardLine(ClientPayload):
    x0: float
    y0: float
    x1: float
    y1: float


class WhiteboardDrawPayload(ClientPayload):
    room_id: str | None = None
    line: WhiteboardLine


class RoomOnlyPayload(ClientPayload):
    room_id: str | None = None


class CaptionUpdatePayload(ClientPayload):
    room_id: str | None = None
    text: str = ""


class HostMuteUserPayload(ClientPayload):
    room_id: str | None = None
    user_id: str | None = None
    type: Literal["audio", "video"]


class ClientEvent(BaseModel):
    """Common envelope fields of every inbound event."""

    model_config = ConfigDict(extra="ignore")

    v: int = WS_PROTOCOL_VERSION


class JoinRoom(ClientEvent):
    type: Literal["join-room"]
    payload: JoinRoomPayload = Field(default_factory=JoinRoomPayload)


class ApproveUser(ClientEvent):
    type: Literal["approve-user"]
    payload: LobbyDecisionPayload = Field(default_factory=LobbyDecisionPayload)


class RejectUser(ClientEvent):
    type: Literal["reject-user"]
    payload: LobbyDecisionPayload = Field(default_factory=LobbyDecisionPayload)


class SendingSignal(ClientEvent):
    type: Literal["sending-signal"]
    payload: SendingSignalPayload = Field(default_factory=SendingSignalPayload)


class ReturningSignal(ClientEvent):
    type: Literal["returning-signal"]
    payload: ReturningSignalPayload = Field(default_factory=ReturningSignalPayload)


class ChatMessage(ClientEvent):
    type: Literal["chat-message"]
    payload: ChatMessagePayload = Field(default_factory=ChatMessagePayload)


class FileShare(ClientEvent):
    type: Literal["file-share"]
    payload: FileSharePayload = Field(default_factory=FileSharePayload)


class WhiteboardDraw(ClientEvent):
    type: Literal["whiteboard-draw"]
    payload: WhiteboardDrawPayload


class WhiteboardClear(ClientEvent):
    type: Literal["whiteboard-clear"]
    payload: RoomOnlyPayload = Field(default_factory=RoomOnlyPayload)


class CaptionUpdate(ClientEvent):
    type: Literal["caption-update"]
    payload: CaptionUpdatePayload = Field(default_factory=CaptionUpdatePayload)


class HostMuteUser(ClientEvent):
    type: Literal["host-mute-user"]
    payload: HostMuteUserPayload


class RemoveUser(ClientEvent):
    type: Literal["remove-user"]
    payload: LobbyDecisionPayload = Field(default_factory=LobbyDecisionPayload)


class Ping(ClientEvent):
    type: Literal["PING"]


class Pong(ClientEvent):
    type: Literal["PONG"]


InboundEvent = Annotated[
    Union[
        JoinRoom,
        ApproveUser,
        RejectUser,
        SendingSignal,
        ReturningSignal,
        ChatMessage,
        FileShare,
        WhiteboardDraw,
        WhiteboardClear,
        CaptionUpdate,
        HostMuteUser,
        RemoveUser,
        Ping,
        Pong,
    ],
    Field(discriminator="type"),
]

_inbound_adapter: TypeAdapter[Any] = TypeAdapter(InboundEvent)


class ProtocolError(ValueError):
    """Raised when an inbound frame is not a known, well-formed event."""


def parse_client_message(message: str) -> ClientEvent:
    """Decode one inbound text frame. Bare ``PING``/``PONG`` strings are accepted."""
    if message in ("PING", "PONG"):
        return _inbound_adapter.validate_python({"type": message})
    try:
        return _inbound_adapter.validate_json(message)
    except ValidationError as exc:
        raise ProtocolError(str(exc)) from exc


def inbound_event_types() -> tuple[type[ClientEvent], ...]:
    """Return every inbound event class of the closed union."""
    union, _ = get_args(InboundEvent)
    return get_args(union)
