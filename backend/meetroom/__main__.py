"""Run the meeting server with uvicorn: ``python -m meetroom``."""

from __future__ import annotations

import uvicorn

from meetroom.core.config import load_settings
from meetroom.main import create_app


def main() -> None:
    settings = load_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.meetroom_app_host,
        port=settings.meetroom_app_port,
        log_level=settings.meetroom_log_level.lower(),
    )


if __name__ == "__main__":
    main()
