"""Pass-through relay of WebRTC handshake payloads between two sessions.

Signals are opaque: they are forwarded exactly as received and never
parsed. The relay does not check room membership; the candidate peers were
already scoped by admission and the ``all-users`` list.
"""

from __future__ import annotations

from typing import Any

from meetroom.rooms.effects import Effect
from meetroom.rooms.effects import Send
from meetroom.ws.protocol import ServerEvent


def relay_offer(*, target_id: str | None, caller_id: str | None, signal: Any) -> list[Effect]:
    """Deliver a caller's offer to ``target_id`` as ``user-joined``."""
    if not target_id:
        return []
    return [Send(target_id, ServerEvent.USER_JOINED, {"signal": signal, "callerId": caller_id})]


def relay_answer(*, sender_id: str, caller_id: str | None, signal: Any) -> list[Effect]:
    """Return the answerer's signal to the original caller, tagged with the answerer's id."""
    if not caller_id:
        return []
    return [Send(caller_id, ServerEvent.RECEIVING_RETURNED_SIGNAL, {"signal": signal, "id": sender_id})]
