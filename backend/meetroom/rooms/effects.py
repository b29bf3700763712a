"""Outbound effects produced by room operations and executed by the transport."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any
from typing import Union

from meetroom.ws.protocol import ServerEvent

CLOSE_LOBBY_REJECTED = (4403, "LOBBY_REJECTED")
CLOSE_REMOVED_BY_HOST = (4403, "REMOVED_BY_HOST")


@dataclass(frozen=True, slots=True)
class Send:
    """Push one event to one session."""

    session_id: str
    event: ServerEvent
    payload: dict[str, Any]


@dataclass(frozen=True, slots=True)
class Close:
    """Close one session's transport after everything queued before it is sent."""

    session_id: str
    code: int = 1000
    reason: str = ""


Effect = Union[Send, Close]


def send_to_many(session_ids: Iterable[str], event: ServerEvent, payload: dict[str, Any]) -> list[Send]:
    return [Send(session_id=session_id, event=event, payload=payload) for session_id in session_ids]


def close_with(session_id: str, code_and_reason: tuple[int, str]) -> Close:
    code, reason = code_and_reason
    return Close(session_id=session_id, code=code, reason=reason)


__all__ = [
    "CLOSE_LOBBY_REJECTED",
    "CLOSE_REMOVED_BY_HOST",
    "Close",
    "Effect",
    "Send",
    "close_with",
    "send_to_many",
]
