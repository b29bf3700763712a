"""Room REST routes."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Depends

from meetroom.api.deps import get_runtime
from meetroom.api.errors import raise_room_not_found
from meetroom.rooms.registry import RoomNotFoundError
from meetroom.rooms.views import room_summary
from meetroom.runtime import MeetingRuntime

router = APIRouter()


@router.get("/api/health")
def health(runtime: MeetingRuntime = Depends(get_runtime)) -> dict[str, object]:
    """Liveness probe with live room and connection counts."""
    return {
        "ok": True,
        "rooms": len(runtime.store.list_rooms()),
        "connections": len(runtime.connections),
    }


@router.get("/api/rooms/{room_id}")
def get_room(room_id: str, runtime: MeetingRuntime = Depends(get_runtime)) -> dict[str, object]:
    """Return whether a room is live and password protected, so clients know whether they will host."""
    try:
        room = runtime.store.get_room(room_id)
    except RoomNotFoundError:
        raise_room_not_found(room_id)
    return room_summary(room)
