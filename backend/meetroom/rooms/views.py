"""Room view builders used by websocket snapshots and REST responses."""

from __future__ import annotations

from meetroom.rooms.registry import LobbyEntry
from meetroom.rooms.registry import Room
from meetroom.rooms.registry import RoomMember


def member_view(member: RoomMember) -> dict[str, object]:
    return {"name": member.name, "isHost": member.is_host}


def lobby_entry_view(entry: LobbyEntry) -> dict[str, object]:
    return {"name": entry.name}


def participants_snapshot(room: Room) -> dict[str, object]:
    return {
        "users": {session_id: member_view(member) for session_id, member in room.members.items()},
        "hostId": room.host_id,
    }


def lobby_snapshot(room: Room) -> dict[str, object]:
    return {
        "roomId": room.room_id,
        "lobby": {session_id: lobby_entry_view(entry) for session_id, entry in room.lobby.items()},
    }


def room_summary(room: Room) -> dict[str, object]:
    """Public room facts; never exposes the password or session ids."""
    return {
        "roomId": room.room_id,
        "hasPassword": room.password is not None,
        "participantCount": len(room.members),
        "waitingCount": len(room.lobby),
    }
