"""Room domain package: store, admission, lobby and membership operations."""

from meetroom.rooms.registry import BadCredentialsError
from meetroom.rooms.registry import LobbyEntry
from meetroom.rooms.registry import LobbyEntryNotFoundError
from meetroom.rooms.registry import NotHostError
from meetroom.rooms.registry import NotMemberError
from meetroom.rooms.registry import Room
from meetroom.rooms.registry import RoomError
from meetroom.rooms.registry import RoomMember
from meetroom.rooms.registry import RoomNotFoundError
from meetroom.rooms.registry import RoomStore
from meetroom.rooms.registry import SessionBusyError

__all__ = [
    "BadCredentialsError",
    "LobbyEntry",
    "LobbyEntryNotFoundError",
    "NotHostError",
    "NotMemberError",
    "Room",
    "RoomError",
    "RoomMember",
    "RoomNotFoundError",
    "RoomStore",
    "SessionBusyError",
]
