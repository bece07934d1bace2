"""Outgoing Signalist emails."""

from typing import Any, Mapping

from ..config.logging import LoggerMixin
from .templates import (
    INACTIVE_USER_REMINDER_EMAIL_TEMPLATE,
    NEWS_SUMMARY_EMAIL_TEMPLATE,
    STOCK_ALERT_LOWER_EMAIL_TEMPLATE,
    STOCK_ALERT_UPPER_EMAIL_TEMPLATE,
    WELCOME_EMAIL_TEMPLATE,
    render_template,
)
from .transport import EmailTransport, OutgoingEmail


class Mailer(LoggerMixin):
    """
    Renders the Signalist email templates and hands them to a transport.

    Transport errors are not caught here; callers decide whether a failed
    send aborts their work or is counted and skipped.
    """

    def __init__(self, transport: EmailTransport, dashboard_url: str):
        self.transport = transport
        self.dashboard_url = dashboard_url

    async def _send(self, to: str, subject: str, text: str, template: str, values: Mapping[str, Any]):
        html = render_template(template, values)
        await self.transport.send(OutgoingEmail(to=to, subject=subject, text=text, html=html))
        self.logger.debug("Email dispatched", recipient=to, subject=subject)

    async def send_welcome_email(self, email: str, name: str, intro: str) -> None:
        await self._send(
            email,
            "Welcome to Signalist - your stock market toolkit is ready!",
            "Thanks for joining Signalist",
            WELCOME_EMAIL_TEMPLATE,
            {"name": name, "intro": intro, "dashboardUrl": self.dashboard_url},
        )

    async def send_news_summary_email(self, email: str, date: str, news_content: str) -> None:
        await self._send(
            email,
            f"📈 Market News Summary Today - {date}",
            "Today's market news summary from Signalist",
            NEWS_SUMMARY_EMAIL_TEMPLATE,
            {"date": date, "newsContent": news_content},
        )

    async def send_inactive_user_email(
        self, email: str, name: str, unsubscribe_url: str = "#"
    ) -> None:
        await self._send(
            email,
            f"{name}, opportunities are waiting for you",
            f"Hi {name}, we miss you at Signalist! Your market opportunities are waiting.",
            INACTIVE_USER_REMINDER_EMAIL_TEMPLATE,
            {
                "name": name,
                "dashboardUrl": self.dashboard_url,
                "unsubscribeUrl": unsubscribe_url,
            },
        )

    async def send_stock_alert_upper_email(
        self,
        email: str,
        symbol: str,
        company: str,
        current_price: str,
        target_price: str,
        timestamp: str,
    ) -> None:
        await self._send(
            email,
            f"Price Alert: {symbol} Hit Upper Target",
            f"{symbol} ({company}) is trading at {current_price}, above your target of {target_price}.",
            STOCK_ALERT_UPPER_EMAIL_TEMPLATE,
            {
                "symbol": symbol,
                "company": company,
                "currentPrice": current_price,
                "targetPrice": target_price,
                "timestamp": timestamp,
                "dashboardUrl": self.dashboard_url,
            },
        )

    async def send_stock_alert_lower_email(
        self,
        email: str,
        symbol: str,
        company: str,
        current_price: str,
        target_price: str,
        timestamp: str,
    ) -> None:
        await self._send(
            email,
            f"Price Alert: {symbol} Hit Lower Target",
            f"{symbol} ({company}) is trading at {current_price}, below your target of {target_price}.",
            STOCK_ALERT_LOWER_EMAIL_TEMPLATE,
            {
                "symbol": symbol,
                "company": company,
                "currentPrice": current_price,
                "targetPrice": target_price,
                "timestamp": timestamp,
                "dashboardUrl": self.dashboard_url,
            },
        )
