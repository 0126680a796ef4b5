"""
FastAPI application for the Activity Charts dashboard.

PURPOSE: Application factory and server runner.
AI CONTEXT: Creates app with all routes registered and one ChartBoard on app.state.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from ..__version__ import __version__
from ..board import ChartBoard
from ..config import Config
from ..storage import StorageManager
from .routes import router

__all__ = ["create_app", "run_dashboard"]

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """
    Manage application lifecycle with startup/shutdown hooks.

    Startup performs the board's cold-start load so the first page
    request already sees the persisted chart order.

    Args:
        app: The FastAPI application instance (provided by FastAPI).

    Yields:
        None. Control returns to FastAPI to handle requests.
    """
    logger.info("Activity Charts dashboard starting (v%s)", __version__)
    board: ChartBoard = app.state.board
    if not board.loaded:
        await board.refresh_async()
    yield
    if board.dragging is not None:
        board.cancel_drag()
        logger.info("Cancelled open drag session on shutdown")
    logger.info("Activity Charts dashboard shutting down")


def create_app(board: ChartBoard | None = None) -> FastAPI:
    """
    Create and configure the FastAPI dashboard application.

    Factory function using the application factory pattern for
    testability. The board is held on app.state, so each app instance
    owns exactly one session state and no module-level globals exist.

    Args:
        board: ChartBoard to serve. Defaults to a board backed by a
            StorageManager at Config.get_storage_dir().

    Returns:
        Configured FastAPI application with dashboard, chart image and
        JSON API routes. OpenAPI documentation is available at /docs.

    Example:
        >>> from fastapi.testclient import TestClient
        >>> client = TestClient(create_app())
        >>> client.get('/').status_code
        200
    """
    if board is None:
        storage = StorageManager()
        board = ChartBoard(storage, storage)

    app = FastAPI(
        title="Activity Charts",
        description="Dashboard for timestamped creation records",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.board = board
    app.include_router(router)
    return app


def run_dashboard(
    host: str = Config.DEFAULT_HOST,
    port: int = Config.DEFAULT_PORT,
    reload: bool = False,
    log_level: str = "info",
) -> None:
    """
    Launch the Activity Charts web dashboard server.

    Args:
        host: Network interface to bind. '127.0.0.1' for local-only access.
        port: TCP port number for the HTTP server.
        reload: Enable auto-reload on code changes for development.
        log_level: Uvicorn logging verbosity.

    Returns:
        None. Blocks until the server is stopped (Ctrl+C).

    Raises:
        OSError: If the port is already in use or host is invalid.
    """
    uvicorn.run(
        "activity_charts.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )


# For direct execution
if __name__ == "__main__":
    run_dashboard()
