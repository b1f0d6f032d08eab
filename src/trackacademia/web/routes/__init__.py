"""Route handlers for the Web API."""

from trackacademia.web.routes.auth import router as auth_router
from trackacademia.web.routes.books import router as books_router
from trackacademia.web.routes.dashboard import router as dashboard_router
from trackacademia.web.routes.health import router as health_router
from trackacademia.web.routes.lectures import router as lectures_router
from trackacademia.web.routes.profile import router as profile_router
from trackacademia.web.routes.uploads import router as uploads_router

__all__ = [
    "auth_router",
    "books_router",
    "dashboard_router",
    "health_router",
    "lectures_router",
    "profile_router",
    "uploads_router",
]
