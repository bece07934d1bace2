"""User-facing price alert management."""

from typing import Any, Dict, List, Optional

from ..config.logging import get_logger
from ..exceptions import NotFoundError, ValidationException
from ..ormdb.database import Database
from ..ormdb.models import Alert
from ..ormdb.repositories import AlertRepository, UserRepository

logger = get_logger(__name__)


class AlertService:
    """Create, list, update and delete the alerts of the signed-in user."""

    def __init__(self, database: Database):
        self.database = database
        self.logger = logger.bind(service="alert_service")

    async def create_alert(
        self,
        email: str,
        symbol: str,
        company: str,
        alert_name: str,
        condition: str,
        threshold: float,
        frequency: str = "day",
    ) -> Alert:
        """
        Create a price alert for the user with ``email``.

        Raises:
            NotFoundError: no user with that email
            ValidationException: a field failed validation
        """
        with self.database.session_scope() as session:
            user = UserRepository(session).get_user_by_email(email)
            if user is None:
                raise NotFoundError("User", email)

            try:
                alert = AlertRepository(session).add_alert(
                    user_id=user.preferred_id,
                    symbol=symbol,
                    company=company,
                    alert_name=alert_name,
                    condition=condition,
                    threshold=threshold,
                    frequency=frequency,
                )
            except (TypeError, ValueError) as e:
                session.rollback()
                raise ValidationException(str(e)) from e

        self.logger.info(
            "Alert created",
            alert_id=alert.id,
            symbol=alert.symbol,
            condition=alert.condition,
            frequency=alert.frequency,
        )
        return alert

    async def list_alerts(self, email: str) -> List[Alert]:
        """Alerts of the user, newest first; empty for unknown users."""
        with self.database.session_scope() as session:
            user = UserRepository(session).get_user_by_email(email)
            if user is None:
                return []
            return AlertRepository(session).get_alerts_for_user(user.preferred_id)

    async def get_alert(self, email: str, alert_id: int) -> Optional[Alert]:
        with self.database.session_scope() as session:
            user = UserRepository(session).get_user_by_email(email)
            if user is None:
                return None
            alert = AlertRepository(session).get_alert(alert_id)
            if alert is None or alert.user_id != user.preferred_id:
                return None
            return alert

    async def update_alert(self, email: str, alert_id: int, changes: Dict[str, Any]) -> bool:
        """
        Apply a partial update to one of the user's alerts.

        Returns:
            True if the alert existed and at least one field changed
        """
        with self.database.session_scope() as session:
            user = UserRepository(session).get_user_by_email(email)
            if user is None:
                return False

            try:
                modified = AlertRepository(session).update_alert(
                    alert_id, user.preferred_id, changes
                )
            except (TypeError, ValueError) as e:
                session.rollback()
                raise ValidationException(str(e)) from e

        if modified:
            self.logger.info("Alert updated", alert_id=alert_id, fields=sorted(changes))
        return modified

    async def delete_alert(self, email: str, alert_id: int) -> bool:
        with self.database.session_scope() as session:
            user = UserRepository(session).get_user_by_email(email)
            if user is None:
                return False
            deleted = AlertRepository(session).delete_alert(alert_id, user.preferred_id)

        if deleted:
            self.logger.info("Alert deleted", alert_id=alert_id)
        return deleted
