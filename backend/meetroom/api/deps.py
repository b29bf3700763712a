"""Dependency helpers shared by API routers."""

from __future__ import annotations

from fastapi import Request

from meetroom.runtime import MeetingRuntime
from meetroom.runtime import runtime_from_app


def get_runtime(request: Request) -> MeetingRuntime:
    """Return the runtime owned by the application serving this request."""
    return runtime_from_app(request.app)
