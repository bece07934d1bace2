"""Routes triggered alerts to the matching email template."""

from ...config.logging import get_logger
from ...notifications.mailer import Mailer
from .models import AlertPayload, NotificationKind

logger = get_logger(__name__)


class NotificationDispatcher:
    """Sends one alert email per triggered alert. Send errors propagate."""

    def __init__(self, mailer: Mailer):
        self.mailer = mailer
        self.logger = logger.bind(component="dispatcher")

    async def send(self, kind: NotificationKind, payload: AlertPayload) -> None:
        if kind is NotificationKind.UPPER:
            send = self.mailer.send_stock_alert_upper_email
        else:
            send = self.mailer.send_stock_alert_lower_email

        await send(
            email=payload.email,
            symbol=payload.symbol,
            company=payload.company,
            current_price=payload.current_price,
            target_price=payload.target_price,
            timestamp=payload.timestamp,
        )

        self.logger.info(
            "Alert notification sent",
            kind=kind.value,
            symbol=payload.symbol,
            recipient=payload.email,
        )
