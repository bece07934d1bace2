"""Data models for the price alert pipeline."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from ...ormdb.models import Alert, AlertCondition, AlertFrequency


class NotificationKind(Enum):
    """Which alert template to send."""

    UPPER = "upper"
    LOWER = "lower"

    @classmethod
    def for_condition(cls, condition: str) -> "NotificationKind":
        if AlertCondition(condition) is AlertCondition.GREATER:
            return cls.UPPER
        return cls.LOWER


@dataclass(frozen=True)
class DueAlert:
    """Detached snapshot of an alert loaded for one evaluation run."""

    id: int
    user_id: str
    symbol: str
    company: str
    alert_name: str
    condition: str
    threshold: float
    frequency: str

    @classmethod
    def from_model(cls, alert: Alert) -> "DueAlert":
        return cls(
            id=alert.id,
            user_id=alert.user_id,
            symbol=alert.symbol,
            company=alert.company,
            alert_name=alert.alert_name,
            condition=alert.condition,
            threshold=alert.threshold,
            frequency=alert.frequency,
        )


@dataclass(frozen=True)
class AlertPayload:
    """Values substituted into an alert email."""

    email: str
    symbol: str
    company: str
    current_price: str
    target_price: str
    timestamp: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class RunSummary:
    """Outcome counts for one cadence run."""

    cadence: AlertFrequency
    total: int = 0
    triggered: int = 0
    skipped: int = 0
    unresolved: int = 0
    failed: int = 0
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    errors: Dict[int, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cadence": self.cadence.value,
            "total": self.total,
            "triggered": self.triggered,
            "skipped": self.skipped,
            "unresolved": self.unresolved,
            "failed": self.failed,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "errors": {str(alert_id): error for alert_id, error in self.errors.items()},
        }
