"""Repository for alert delivery markers."""

import datetime
from typing import Optional

from sqlalchemy import and_

from ..models import AlertDelivery, DeliveryStatus
from .base import BaseRepository


class AlertDeliveryRepository(BaseRepository):
    """Repository for per-window alert delivery markers."""

    def get_delivery(self, alert_id: int, window_key: str) -> Optional[AlertDelivery]:
        """Get the delivery marker for an alert window."""
        return (
            self.session.query(AlertDelivery)
            .filter(
                and_(
                    AlertDelivery.alert_id == alert_id,
                    AlertDelivery.window_key == window_key,
                )
            )
            .first()
        )

    def begin_delivery(
        self, alert_id: int, window_key: str, attempted_at: datetime.datetime
    ) -> Optional[AlertDelivery]:
        """
        Record a pending delivery for an alert window.

        Returns:
            The pending marker, or None if this window was already delivered
        """
        delivery = self.get_delivery(alert_id, window_key)

        if delivery is not None and delivery.status == DeliveryStatus.SENT.value:
            return None

        if delivery is None:
            delivery = AlertDelivery(alert_id=alert_id, window_key=window_key)
            self.session.add(delivery)

        delivery.status = DeliveryStatus.PENDING.value
        delivery.attempted_at = attempted_at
        delivery.error = None

        self.session.commit()
        self.session.refresh(delivery)
        return delivery

    def mark_sent(self, delivery_id: int, sent_at: datetime.datetime) -> None:
        """Mark a delivery as confirmed sent."""
        delivery = self.session.get(AlertDelivery, delivery_id)
        if delivery is None:
            return
        delivery.status = DeliveryStatus.SENT.value
        delivery.sent_at = sent_at
        self.session.commit()

    def mark_failed(self, delivery_id: int, error: str) -> None:
        """Mark a delivery as failed so the window can be retried."""
        delivery = self.session.get(AlertDelivery, delivery_id)
        if delivery is None:
            return
        delivery.status = DeliveryStatus.FAILED.value
        delivery.error = error
        self.session.commit()
