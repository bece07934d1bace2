"""Scheduled price alert job entry points."""

import asyncio
from typing import Optional, Union

from ..config.logging import get_logger
from ..ormdb.models import AlertFrequency
from ..services.alerts import RunSummary
from .context import AppContext, get_app_context

logger = get_logger(__name__)


async def run_price_alerts(
    cadence: Union[AlertFrequency, str], context: Optional[AppContext] = None
) -> RunSummary:
    """Run the price alert pipeline for one cadence."""
    context = context or get_app_context()
    return await context.alert_runner.run(cadence)


def run_price_alerts_sync(cadence: str) -> Optional[RunSummary]:
    """
    Synchronous wrapper used by the scheduler.

    Scheduler worker threads have no event loop, so each run gets its own.
    """
    try:
        summary = asyncio.run(run_price_alerts(cadence))
        logger.info("Price alert job completed", **summary.to_dict())
        return summary
    except Exception as e:
        logger.error("Price alert job failed", cadence=cadence, error=str(e), exc_info=True)
        return None


def run_daily_price_alerts():
    return run_price_alerts_sync(AlertFrequency.DAY.value)


def run_weekly_price_alerts():
    return run_price_alerts_sync(AlertFrequency.WEEK.value)


def run_monthly_price_alerts():
    return run_price_alerts_sync(AlertFrequency.MONTH.value)
