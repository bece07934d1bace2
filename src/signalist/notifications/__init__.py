"""Email notifications."""

from .mailer import Mailer
from .templates import (
    DEFAULT_WELCOME_INTRO,
    build_welcome_intro,
    format_email_date,
    render_news_content,
    render_template,
)
from .transport import EmailTransport, OutgoingEmail, SMTPEmailTransport

__all__ = [
    "DEFAULT_WELCOME_INTRO",
    "EmailTransport",
    "Mailer",
    "OutgoingEmail",
    "SMTPEmailTransport",
    "build_welcome_intro",
    "format_email_date",
    "render_news_content",
    "render_template",
]
