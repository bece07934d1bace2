"""API routers for Signalist."""

from .alerts import router as alerts_router
from .jobs import router as jobs_router
from .stocks import router as stocks_router
from .users import router as users_router
from .watchlist import router as watchlist_router

__all__ = [
    "alerts_router",
    "jobs_router",
    "stocks_router",
    "users_router",
    "watchlist_router",
]
