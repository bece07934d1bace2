"""Tests for the SMTP transport."""

import smtplib
import sys
from unittest.mock import MagicMock, patch

import pytest

sys.path.append("src")
from signalist.exceptions import ConfigurationError, EmailDeliveryError
from signalist.notifications import OutgoingEmail, SMTPEmailTransport

EMAIL = OutgoingEmail(
    to="a@x.com",
    subject="Price Alert: AAPL Hit Upper Target",
    text="AAPL is above your target",
    html="<p>AAPL is above your target</p>",
)


@pytest.fixture
def transport():
    return SMTPEmailTransport("smtp.test", 587, "alerts@signalist.test", "secret")


@pytest.fixture
def mock_smtp():
    with patch("signalist.notifications.transport.smtplib.SMTP") as smtp_class:
        server = MagicMock()
        smtp_class.return_value.__enter__.return_value = server
        yield smtp_class, server


class TestSMTPEmailTransport:
    def test_message_has_text_and_html_parts(self, transport):
        message = transport.build_message(EMAIL)

        assert message["To"] == "a@x.com"
        assert message["From"] == "Signalist <alerts@signalist.test>"
        assert message["Subject"] == EMAIL.subject
        assert message.get_body(("plain",)).get_content().strip() == EMAIL.text
        assert message.get_body(("html",)).get_content().strip() == EMAIL.html

    @pytest.mark.asyncio
    async def test_send_uses_starttls_and_login(self, transport, mock_smtp):
        smtp_class, server = mock_smtp

        await transport.send(EMAIL)

        smtp_class.assert_called_once_with("smtp.test", 587, timeout=30.0)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("alerts@signalist.test", "secret")
        server.send_message.assert_called_once()

    @pytest.mark.asyncio
    async def test_smtp_failure_raises_delivery_error(self, transport, mock_smtp):
        _, server = mock_smtp
        server.send_message.side_effect = smtplib.SMTPRecipientsRefused(
            {"a@x.com": (550, b"mailbox unavailable")}
        )

        with pytest.raises(EmailDeliveryError) as exc_info:
            await transport.send(EMAIL)

        assert exc_info.value.details["recipient"] == "a@x.com"
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_connection_error_raises_delivery_error(self, transport, mock_smtp):
        smtp_class, _ = mock_smtp
        smtp_class.side_effect = ConnectionRefusedError("refused")

        with pytest.raises(EmailDeliveryError):
            await transport.send(EMAIL)

    @pytest.mark.asyncio
    async def test_missing_credentials(self, mock_smtp):
        smtp_class, _ = mock_smtp
        transport = SMTPEmailTransport("smtp.test", 587, None, None)

        with pytest.raises(ConfigurationError):
            await transport.send(EMAIL)
        smtp_class.assert_not_called()
