"""Repository for price alert operations."""

import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, desc

from ..models import Alert
from .base import BaseRepository

UPDATABLE_FIELDS = (
    "alert_name",
    "symbol",
    "company",
    "condition",
    "threshold",
    "frequency",
)


class AlertRepository(BaseRepository):
    """Repository for price alert operations."""

    def add_alert(
        self,
        user_id: str,
        symbol: str,
        company: str,
        alert_name: str,
        condition: str,
        threshold: float,
        frequency: str,
    ) -> Alert:
        """Persist a new alert; symbol is normalized by the model."""
        alert = Alert(
            user_id=user_id,
            symbol=symbol,
            company=company,
            alert_name=alert_name,
            alert_type="price",
            condition=condition,
            threshold=threshold,
            frequency=frequency,
        )

        self.session.add(alert)
        self.session.commit()
        self.session.refresh(alert)

        return alert

    def get_alert(self, alert_id: int) -> Optional[Alert]:
        """Get an alert by id."""
        return self.session.get(Alert, alert_id)

    def get_alerts_for_user(self, user_id: str) -> List[Alert]:
        """Get a user's alerts, newest first."""
        return (
            self.session.query(Alert)
            .filter(Alert.user_id == user_id)
            .order_by(desc(Alert.created_at), desc(Alert.id))
            .all()
        )

    def get_alerts_by_frequency(self, frequency: str) -> List[Alert]:
        """Get every alert evaluated at the given cadence."""
        return (
            self.session.query(Alert)
            .filter(Alert.frequency == frequency)
            .order_by(Alert.id)
            .all()
        )

    def update_alert(
        self, alert_id: int, user_id: str, changes: Dict[str, Any]
    ) -> bool:
        """
        Apply a partial update to an alert owned by ``user_id``.

        Returns:
            True if at least one field changed
        """
        alert = (
            self.session.query(Alert)
            .filter(and_(Alert.id == alert_id, Alert.user_id == user_id))
            .first()
        )
        if alert is None:
            return False

        modified = False
        for field, value in changes.items():
            if field not in UPDATABLE_FIELDS or value is None:
                continue
            before = getattr(alert, field)
            setattr(alert, field, value)
            if getattr(alert, field) != before:
                modified = True

        if modified:
            self.session.commit()
        return modified

    def delete_alert(self, alert_id: int, user_id: str) -> bool:
        """Delete an alert owned by ``user_id``."""
        alert = (
            self.session.query(Alert)
            .filter(and_(Alert.id == alert_id, Alert.user_id == user_id))
            .first()
        )
        if alert is None:
            return False

        self.session.delete(alert)
        self.session.commit()
        return True

    def mark_triggered(self, alert_id: int, triggered_at: datetime.datetime) -> bool:
        """Record when an alert last fired."""
        updated = (
            self.session.query(Alert)
            .filter(Alert.id == alert_id)
            .update({Alert.last_triggered_at: triggered_at}, synchronize_session=False)
        )
        self.session.commit()
        return updated == 1
