"""FastAPI application factory.

Main entry point for the coursework tracker Web API. The app is stateless
between requests: every handler loads the snapshot through get_tracker().
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from coursequest.config.app_config import load_app_config
from coursequest.core.state_store import get_state_path
from coursequest.web.deps import get_tracker
from coursequest.web.routes import (
    health_router,
    state_router,
    courses_router,
    quests_router,
)

logger = structlog.get_logger(__name__)

API_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Seed quests on first run and log where the snapshot lives."""
    tracker = get_tracker()
    logger.info(
        "api_startup",
        state_path=str(get_state_path(tracker.data_dir).absolute()),
        courses=len(tracker.state.courses),
        quests=len(tracker.state.quests),
        player_level=tracker.state.player.level,
    )
    yield
    logger.info("api_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    CORS origins come from server.cors_origins. Credentials are only
    allowed when the origins are listed explicitly.

    Returns:
        Configured FastAPI app instance
    """
    server = load_app_config().server

    app = FastAPI(
        title="Coursework Quest API",
        description="Local API for the gamified coursework tracker",
        version=API_VERSION,
        lifespan=lifespan,
    )

    wildcard = "*" in server.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if wildcard else server.cors_origins,
        allow_credentials=not wildcard,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    for router in (health_router, state_router, courses_router, quests_router):
        app.include_router(router)

    return app


# Default app instance for uvicorn
app = create_app()
