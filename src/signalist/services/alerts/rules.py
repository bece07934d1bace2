"""Pure rules shared by the alert evaluator and its callers."""

import math
from datetime import datetime, timezone
from email.utils import format_datetime

from ...ormdb.models import AlertCondition, AlertFrequency


def is_valid_threshold(threshold) -> bool:
    return (
        isinstance(threshold, (int, float))
        and not isinstance(threshold, bool)
        and math.isfinite(threshold)
    )


def condition_met(condition: str, current: float, threshold: float) -> bool:
    """Strict comparison; a price equal to the threshold never triggers."""
    if AlertCondition(condition) is AlertCondition.GREATER:
        return current > threshold
    return current < threshold


def format_price(value: float) -> str:
    return f"${value:.2f}"


def format_timestamp(moment: datetime) -> str:
    """RFC 1123 UTC string, e.g. 'Mon, 19 Oct 2026 13:00:00 GMT'."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


def delivery_window(frequency: str, moment: datetime) -> str:
    """
    Key of the cadence period containing ``moment``.

    One notification is delivered per alert per window, so re-running a
    cadence inside the same period never sends twice while the next period
    starts fresh.
    """
    cadence = AlertFrequency(frequency)
    if cadence is AlertFrequency.DAY:
        return f"day:{moment:%Y-%m-%d}"
    if cadence is AlertFrequency.WEEK:
        year, week, _ = moment.isocalendar()
        return f"week:{year}-W{week:02d}"
    return f"month:{moment:%Y-%m}"
