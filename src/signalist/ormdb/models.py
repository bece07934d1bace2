"""SQLAlchemy ORM models for the Signalist application."""

import datetime
import enum
import math

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship, validates

from .database import Base


def utcnow() -> datetime.datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class AlertCondition(str, enum.Enum):
    """Direction a price must cross for an alert to fire."""

    GREATER = "greater"
    LESS = "less"


class AlertFrequency(str, enum.Enum):
    """Cadence at which an alert is evaluated."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class DeliveryStatus(str, enum.Enum):
    """State of a notification attempt for one alert window."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


def normalize_symbol(symbol: str) -> str:
    """Trim and uppercase a ticker symbol."""
    if not symbol or not symbol.strip():
        raise ValueError("Symbol must be a non-empty string")
    return symbol.strip().upper()


class User(Base):
    """
    User entity owned by the external auth layer.

    Older accounts are referenced by the integer ``id``; accounts created
    through the auth layer also carry an ``external_id`` string.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String, unique=True, nullable=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=True)
    country = Column(String, nullable=True)
    investment_goals = Column(String, nullable=True)
    risk_tolerance = Column(String, nullable=True)
    preferred_industry = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    last_visit = Column(DateTime, nullable=True)

    @property
    def preferred_id(self) -> str:
        """Identifier stored on alerts and watchlist items for this user."""
        return self.external_id or str(self.id)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"


class Alert(Base):
    """A user's standing instruction to be notified when a price crosses a threshold."""

    __tablename__ = "alerts"
    __table_args__ = (
        Index(
            "ix_alerts_user_symbol_condition",
            "user_id",
            "symbol",
            "condition",
            "threshold",
            "frequency",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    symbol = Column(String, nullable=False)
    company = Column(String, nullable=False)
    alert_name = Column(String, nullable=False)
    alert_type = Column(String, default="price", nullable=False)
    condition = Column(String, nullable=False)
    threshold = Column(Float, nullable=False)
    frequency = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    last_triggered_at = Column(DateTime, nullable=True)

    deliveries = relationship(
        "AlertDelivery", back_populates="alert", cascade="all, delete-orphan"
    )

    @validates("symbol")
    def _validate_symbol(self, key, value):
        return normalize_symbol(value)

    @validates("company", "alert_name")
    def _validate_text(self, key, value):
        if value is None or not str(value).strip():
            raise ValueError(f"{key} must be a non-empty string")
        return str(value).strip()

    @validates("condition")
    def _validate_condition(self, key, value):
        return AlertCondition(value).value

    @validates("frequency")
    def _validate_frequency(self, key, value):
        return AlertFrequency(value).value

    @validates("threshold")
    def _validate_threshold(self, key, value):
        threshold = float(value)
        if not math.isfinite(threshold):
            raise ValueError("threshold must be a finite number")
        return threshold

    def __repr__(self):
        return (
            f"<Alert(id={self.id}, symbol='{self.symbol}', "
            f"condition='{self.condition}', threshold={self.threshold})>"
        )


class AlertDelivery(Base):
    """Notification attempt for one alert within one evaluation window."""

    __tablename__ = "alert_deliveries"
    __table_args__ = (
        UniqueConstraint("alert_id", "window_key", name="uq_alert_delivery_window"),
    )

    id = Column(Integer, primary_key=True, index=True)
    alert_id = Column(
        Integer, ForeignKey("alerts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    window_key = Column(String, nullable=False)
    status = Column(String, default=DeliveryStatus.PENDING.value, nullable=False)
    attempted_at = Column(DateTime, default=utcnow, nullable=False)
    sent_at = Column(DateTime, nullable=True)
    error = Column(Text, nullable=True)

    alert = relationship("Alert", back_populates="deliveries")

    def __repr__(self):
        return (
            f"<AlertDelivery(alert_id={self.alert_id}, window='{self.window_key}', "
            f"status='{self.status}')>"
        )


class WatchlistItem(Base):
    """A symbol tracked by a user for display."""

    __tablename__ = "watchlist_items"
    __table_args__ = (
        UniqueConstraint("user_id", "symbol", name="uq_watchlist_user_symbol"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    symbol = Column(String, nullable=False)
    company = Column(String, nullable=False)
    added_at = Column(DateTime, default=utcnow, nullable=False)

    @validates("symbol")
    def _validate_symbol(self, key, value):
        return normalize_symbol(value)

    def __repr__(self):
        return f"<WatchlistItem(user_id='{self.user_id}', symbol='{self.symbol}')>"
