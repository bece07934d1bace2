"""Database module for SQLAlchemy ORM integration."""

from .database import Base, Database, create_engine_for_url, get_database
from .models import (
    Alert,
    AlertCondition,
    AlertDelivery,
    AlertFrequency,
    DeliveryStatus,
    User,
    WatchlistItem,
)
from .repositories import (
    AlertDeliveryRepository,
    AlertRepository,
    UserRepository,
    WatchlistRepository,
)

__all__ = [
    # Database components
    "Base",
    "Database",
    "create_engine_for_url",
    "get_database",
    # Models
    "Alert",
    "AlertCondition",
    "AlertDelivery",
    "AlertFrequency",
    "DeliveryStatus",
    "User",
    "WatchlistItem",
    # Repositories
    "AlertDeliveryRepository",
    "AlertRepository",
    "UserRepository",
    "WatchlistRepository",
]
