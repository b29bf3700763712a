"""HTTP error mapping for room lookups."""

from __future__ import annotations

from typing import Any
from typing import NoReturn

from fastapi import HTTPException

from meetroom.api.http import api_error

ROOM_NOT_FOUND = "ROOM_NOT_FOUND"


def raise_api_error(
    *,
    status_code: int,
    code: str,
    message: str,
    detail: dict[str, Any],
) -> NoReturn:
    raise HTTPException(
        status_code=status_code,
        detail=api_error(code=code, message=message, detail=detail),
    )


def raise_room_not_found(room_id: str) -> NoReturn:
    """404 for a room id with no live room; the id is echoed back as ``roomId``."""
    raise_api_error(
        status_code=404,
        code=ROOM_NOT_FOUND,
        message="room not found",
        detail={"roomId": room_id},
    )
