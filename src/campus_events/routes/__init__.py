"""FastAPI routers for the Campus Events API."""

from campus_events.routes.clubs import router as clubs_router
from campus_events.routes.events import router as events_router
from campus_events.routes.users import router as users_router

__all__ = ["clubs_router", "events_router", "users_router"]
