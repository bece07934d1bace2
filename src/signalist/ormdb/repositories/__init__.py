"""Repository classes for database operations using SQLAlchemy ORM."""

from .alert import AlertRepository
from .alert_delivery import AlertDeliveryRepository
from .base import BaseRepository
from .user import UserRepository
from .watchlist import WatchlistRepository

__all__ = [
    "BaseRepository",
    "AlertRepository",
    "AlertDeliveryRepository",
    "UserRepository",
    "WatchlistRepository",
]
