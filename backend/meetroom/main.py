"""FastAPI application entrypoint for the meeting server."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException

from meetroom.api.http import handle_http_exception
from meetroom.api.routers.rooms import router as rooms_router
from meetroom.core.config import Settings
from meetroom.core.config import load_settings
from meetroom.core.logging import configure_logging
from meetroom.runtime import build_runtime
from meetroom.runtime import runtime_from_app
from meetroom.ws.routers import router as ws_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    runtime = runtime_from_app(app)
    logger.info(
        "meeting server ready on %s:%s",
        runtime.settings.meetroom_app_host,
        runtime.settings.meetroom_app_port,
    )
    yield
    await runtime.connections.aclose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build an app with its own empty room store."""
    settings = settings or load_settings()
    configure_logging(settings.meetroom_log_level)

    app = FastAPI(lifespan=lifespan)
    app.state.runtime = build_runtime(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(HTTPException)
    async def handle_http_exception_route(request: Request, exc: HTTPException) -> JSONResponse:
        """Adapter used by FastAPI exception handling."""
        return await handle_http_exception(request, exc)

    app.include_router(rooms_router)
    app.include_router(ws_router)

    # Mounted last so API and websocket routes take precedence over "/".
    if settings.meetroom_static_dir:
        static_dir = Path(settings.meetroom_static_dir)
        if static_dir.is_dir():
            app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        else:
            logger.warning("static dir %s does not exist; not serving static files", static_dir)

    return app


app = create_app()


__all__ = [
    "Settings",
    "app",
    "create_app",
    "lifespan",
]
