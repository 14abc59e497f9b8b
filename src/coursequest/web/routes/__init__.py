"""Route handlers for Web API."""

from coursequest.web.routes.health import router as health_router
from coursequest.web.routes.state import router as state_router
from coursequest.web.routes.courses import router as courses_router
from coursequest.web.routes.quests import router as quests_router

__all__ = [
    "health_router",
    "state_router",
    "courses_router",
    "quests_router",
]
