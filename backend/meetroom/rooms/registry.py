"""In-memory room store: rooms, admitted members and lobby entries."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from dataclasses import field
import secrets
import threading

DEFAULT_HOST_NAME = "Host"
DEFAULT_GUEST_NAME = "Guest"


class RoomError(Exception):
    """Base class for room-domain errors."""


class RoomNotFoundError(RoomError):
    """Raised when room_id has no live room."""


class RoomExistsError(RoomError):
    """Raised when creating a room whose id is already taken."""


class SessionBusyError(RoomError):
    """Raised when a session already belongs to a room (as member or waiting)."""


class BadCredentialsError(RoomError):
    """Raised when the supplied password does not match the room password."""


class NotHostError(RoomError):
    """Raised when a host-only operation comes from another session."""


class NotMemberError(RoomError):
    """Raised when an operation requires room membership."""


class LobbyEntryNotFoundError(RoomError):
    """Raised when approve/reject targets a session that is not waiting."""


class HostProtectedError(RoomError):
    """Raised when a host-only operation targets the host itself."""


@dataclass(slots=True)
class RoomMember:
    """Admitted participant."""

    session_id: str
    name: str
    is_host: bool = False


@dataclass(slots=True)
class LobbyEntry:
    """Session waiting for the host to admit or reject it."""

    session_id: str
    name: str


@dataclass(slots=True)
class Room:
    """Room aggregate state. Holds session ids only, never connection handles."""

    room_id: str
    host_id: str
    password: str | None = None
    members: dict[str, RoomMember] = field(default_factory=dict)
    lobby: dict[str, LobbyEntry] = field(default_factory=dict)

    def member_ids(self, *, exclude: str | None = None) -> list[str]:
        return [session_id for session_id in self.members if session_id != exclude]


@dataclass(slots=True)
class Departure:
    """What a disconnecting session left behind."""

    room: Room
    member: RoomMember | None = None
    lobby_entry: LobbyEntry | None = None
    room_closed: bool = False


class RoomStore:
    """Process-wide mapping from room id to room state.

    Every mutation runs under one re-entrant lock, so handlers that call
    several store methods in a row can hold ``lock()`` to make the whole
    sequence atomic.
    """

    def __init__(self) -> None:
        self._rooms: dict[str, Room] = {}
        self._session_room: dict[str, str] = {}
        self._lock = threading.RLock()

    @contextmanager
    def lock(self) -> Iterator[None]:
        """Acquire the store write lock."""
        with self._lock:
            yield

    def get_room(self, room_id: str) -> Room:
        """Return room by id."""
        room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFoundError(f"room_id={room_id} not found")
        return room

    def has_room(self, room_id: str) -> bool:
        return room_id in self._rooms

    def list_rooms(self) -> list[Room]:
        """Return all live rooms sorted by room_id."""
        return [self._rooms[room_id] for room_id in sorted(self._rooms)]

    def find_room_id_by_session(self, session_id: str) -> str | None:
        """Return the room a session belongs to, or None."""
        return self._session_room.get(session_id)

    def create_room(
        self,
        room_id: str,
        *,
        host_id: str,
        host_name: str = DEFAULT_HOST_NAME,
        password: str | None = None,
    ) -> Room:
        """Create a room with host_id as its host and sole member."""
        with self._lock:
            if room_id in self._rooms:
                raise RoomExistsError(f"room_id={room_id} already exists")
            self._require_free_session(host_id)

            room = Room(room_id=room_id, host_id=host_id, password=password or None)
            room.members[host_id] = RoomMember(session_id=host_id, name=host_name, is_host=True)
            self._rooms[room_id] = room
            self._session_room[host_id] = room_id
            return room

    def enqueue(
        self,
        room_id: str,
        *,
        session_id: str,
        name: str = DEFAULT_GUEST_NAME,
        password: str | None = None,
    ) -> Room:
        """Put a session into the lobby of an existing room after the password check."""
        with self._lock:
            room = self.get_room(room_id)
            self._require_free_session(session_id)
            if room.password is not None and not secrets.compare_digest(
                room.password.encode("utf-8"), (password or "").encode("utf-8")
            ):
                raise BadCredentialsError(f"room_id={room_id} password mismatch")

            room.lobby[session_id] = LobbyEntry(session_id=session_id, name=name)
            self._session_room[session_id] = room_id
            return room

    def admit(self, room_id: str, *, actor_id: str, session_id: str) -> RoomMember:
        """Move a lobby entry into members. Host only."""
        with self._lock:
            room = self.get_room(room_id)
            self._require_host(room, actor_id)
            entry = room.lobby.pop(session_id, None)
            if entry is None:
                raise LobbyEntryNotFoundError(f"session_id={session_id} not waiting in room_id={room_id}")

            member = RoomMember(session_id=session_id, name=entry.name, is_host=False)
            room.members[session_id] = member
            return member

    def reject(self, room_id: str, *, actor_id: str, session_id: str) -> LobbyEntry:
        """Drop a lobby entry without admitting it. Host only."""
        with self._lock:
            room = self.get_room(room_id)
            self._require_host(room, actor_id)
            entry = room.lobby.pop(session_id, None)
            if entry is None:
                raise LobbyEntryNotFoundError(f"session_id={session_id} not waiting in room_id={room_id}")

            self._session_room.pop(session_id, None)
            return entry

    def remove_member(self, room_id: str, *, actor_id: str, session_id: str) -> RoomMember:
        """Evict a non-host member. Host only."""
        with self._lock:
            room = self.get_room(room_id)
            self._require_host(room, actor_id)
            if session_id == room.host_id:
                raise HostProtectedError(f"host of room_id={room_id} cannot be removed")
            member = room.members.pop(session_id, None)
            if member is None:
                raise NotMemberError(f"session_id={session_id} not in room_id={room_id}")

            self._session_room.pop(session_id, None)
            return member

    def require_host(self, room_id: str, actor_id: str) -> Room:
        with self._lock:
            room = self.get_room(room_id)
            self._require_host(room, actor_id)
            return room

    def require_member(self, room_id: str, session_id: str) -> RoomMember:
        with self._lock:
            room = self.get_room(room_id)
            member = room.members.get(session_id)
            if member is None:
                raise NotMemberError(f"session_id={session_id} not in room_id={room_id}")
            return member

    def discard_session(self, session_id: str) -> Departure | None:
        """Remove a session from its room; tear the room down when the host leaves."""
        with self._lock:
            room_id = self._session_room.pop(session_id, None)
            if room_id is None:
                return None
            room = self._rooms.get(room_id)
            if room is None:
                return None

            departure = Departure(room=room)
            departure.member = room.members.pop(session_id, None)
            departure.lobby_entry = room.lobby.pop(session_id, None)

            if session_id == room.host_id:
                self._close_room(room)
                departure.room_closed = True
            return departure

    def _close_room(self, room: Room) -> None:
        self._rooms.pop(room.room_id, None)
        for session_id in list(room.members) + list(room.lobby):
            if self._session_room.get(session_id) == room.room_id:
                self._session_room.pop(session_id, None)

    def _require_free_session(self, session_id: str) -> None:
        current_room_id = self.find_room_id_by_session(session_id)
        if current_room_id is not None:
            raise SessionBusyError(f"session_id={session_id} already in room_id={current_room_id}")

    @staticmethod
    def _require_host(room: Room, actor_id: str) -> None:
        if actor_id != room.host_id:
            raise NotHostError(f"session_id={actor_id} is not host of room_id={room.room_id}")


__all__ = [
    "BadCredentialsError",
    "DEFAULT_GUEST_NAME",
    "DEFAULT_HOST_NAME",
    "Departure",
    "HostProtectedError",
    "LobbyEntry",
    "LobbyEntryNotFoundError",
    "NotHostError",
    "NotMemberError",
    "Room",
    "RoomError",
    "RoomExistsError",
    "RoomMember",
    "RoomNotFoundError",
    "RoomStore",
    "SessionBusyError",
]
