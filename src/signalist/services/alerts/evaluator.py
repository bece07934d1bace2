"""Evaluates a single price alert against a fresh quote."""

from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from ...config.logging import get_logger
from ...market.models import Quote
from ...ormdb.database import Database
from ...ormdb.repositories import AlertDeliveryRepository, AlertRepository
from .dispatcher import NotificationDispatcher
from .models import AlertPayload, DueAlert, NotificationKind
from .rules import (
    condition_met,
    delivery_window,
    format_price,
    format_timestamp,
    is_valid_threshold,
)

logger = get_logger(__name__)


class QuoteProvider(Protocol):
    async def get_quote(self, symbol: str) -> Optional[Quote]: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AlertEvaluator:
    """
    Decides whether an alert fires and delivers its notification.

    A pending delivery marker is written for the alert's cadence window before
    the email goes out. The marker becomes ``sent`` and ``last_triggered_at``
    is stamped only once the transport confirms the send; a failed send marks
    the window ``failed`` so a later run in the same window may retry it.
    """

    def __init__(
        self,
        database: Database,
        quotes: QuoteProvider,
        dispatcher: NotificationDispatcher,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.database = database
        self.quotes = quotes
        self.dispatcher = dispatcher
        self.clock = clock

    async def evaluate(self, alert: DueAlert, email: str) -> bool:
        """
        Evaluate one alert for its owner.

        Returns:
            True if a notification was sent during this call
        """
        log = logger.bind(alert_id=alert.id, symbol=alert.symbol)

        if not is_valid_threshold(alert.threshold):
            log.warning("Alert threshold is not a finite number", threshold=alert.threshold)
            return False

        quote = await self.quotes.get_quote(alert.symbol)
        if quote is None:
            log.info("No quote available, alert skipped")
            return False

        current = quote.current_price
        if not condition_met(alert.condition, current, alert.threshold):
            log.debug("Alert condition not met", current=current, threshold=alert.threshold)
            return False

        now = self.clock()
        stored_now = now.astimezone(timezone.utc).replace(tzinfo=None)
        window = delivery_window(alert.frequency, stored_now)

        with self.database.session_scope() as session:
            delivery = AlertDeliveryRepository(session).begin_delivery(
                alert.id, window, stored_now
            )
            delivery_id = delivery.id if delivery is not None else None

        if delivery_id is None:
            log.info("Alert already delivered for this window", window=window)
            return False

        payload = AlertPayload(
            email=email,
            symbol=alert.symbol,
            company=alert.company,
            current_price=format_price(current),
            target_price=format_price(alert.threshold),
            timestamp=format_timestamp(now),
        )

        try:
            await self.dispatcher.send(NotificationKind.for_condition(alert.condition), payload)
        except Exception as e:
            with self.database.session_scope() as session:
                AlertDeliveryRepository(session).mark_failed(delivery_id, str(e))
            log.error("Alert notification failed", window=window, error=str(e))
            raise

        with self.database.session_scope() as session:
            AlertDeliveryRepository(session).mark_sent(delivery_id, stored_now)
            AlertRepository(session).mark_triggered(alert.id, stored_now)

        log.info(
            "Alert triggered",
            condition=alert.condition,
            current=current,
            threshold=alert.threshold,
            window=window,
        )
        return True
