"""Scheduled engagement email job entry points."""

import asyncio
from typing import Any, Dict, Optional

from ..config.logging import get_logger
from .context import get_app_context

logger = get_logger(__name__)


def run_news_summary_sync() -> Optional[Dict[str, Any]]:
    """Send the daily news digest from a scheduler thread."""
    try:
        result = asyncio.run(get_app_context().engagement.send_daily_news_summary())
        logger.info("News summary job completed", **result)
        return result
    except Exception as e:
        logger.error("News summary job failed", error=str(e), exc_info=True)
        return None


def run_inactive_user_reminders_sync() -> Optional[Dict[str, Any]]:
    """Send inactive-user reminders from a scheduler thread."""
    context = get_app_context()
    try:
        result = asyncio.run(
            context.engagement.send_inactive_user_reminders(context.settings.inactive_user_days)
        )
        logger.info("Inactive user reminder job completed", **result)
        return result
    except Exception as e:
        logger.error("Inactive user reminder job failed", error=str(e), exc_info=True)
        return None
