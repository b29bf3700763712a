"""Runtime state shared by REST and WebSocket handlers of one application."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from meetroom.core.config import Settings
from meetroom.core.config import load_settings
from meetroom.rooms.registry import RoomStore
from meetroom.ws.connections import ConnectionRegistry


@dataclass(slots=True)
class MeetingRuntime:
    """Settings, room store and live connections owned by one app instance."""

    settings: Settings
    store: RoomStore
    connections: ConnectionRegistry


def build_runtime(settings: Settings | None = None) -> MeetingRuntime:
    """Create fresh in-memory state; nothing survives a restart."""
    return MeetingRuntime(
        settings=settings or load_settings(),
        store=RoomStore(),
        connections=ConnectionRegistry(),
    )


def runtime_from_app(app: Any) -> MeetingRuntime:
    return app.state.runtime


__all__ = [
    "MeetingRuntime",
    "Settings",
    "build_runtime",
    "runtime_from_app",
]
