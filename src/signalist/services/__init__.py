"""Service layer for business logic encapsulation."""

from .alert_service import AlertService
from .alerts import AlertEvaluator, NotificationDispatcher, PriceAlertRunner, RunSummary
from .engagement import EngagementService
from .user_service import Registration, UserService
from .watchlist_service import WatchlistEntry, WatchlistService

__all__ = [
    "AlertEvaluator",
    "AlertService",
    "EngagementService",
    "NotificationDispatcher",
    "PriceAlertRunner",
    "Registration",
    "RunSummary",
    "UserService",
    "WatchlistEntry",
    "WatchlistService",
]
