"""FastAPI application factory for the notifier server.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan only logs startup/shutdown: the notifier keeps no
connection pools or background workers, every WebSocket is handled in
its own endpoint coroutine.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from phonecall import __version__
from phonecall.api import api_router
from phonecall.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    logger.info(
        "phonecall.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    yield

    logger.info("phonecall.shutdown")


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="phonecall notifier",
        description="Pushes one notification record to every WebSocket client that connects",
        version=__version__,
        lifespan=lifespan,
    )

    from phonecall.middleware.connection_id import ConnectionIdMiddleware

    app.add_middleware(ConnectionIdMiddleware)

    # Mount API routes
    app.include_router(api_router)

    # Mount WebSocket route (the notifier itself)
    from phonecall.realtime.websocket import router as ws_router
    app.include_router(ws_router)

    return app


# Default app instance (used by uvicorn: phonecall.main:app)
app = create_app()
