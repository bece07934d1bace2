"""
Price alert pipeline.

Loads the alerts due at a cadence, checks each against a fresh quote and
emails the owner when the threshold is crossed.
"""

from .dispatcher import NotificationDispatcher
from .evaluator import AlertEvaluator, QuoteProvider
from .models import AlertPayload, DueAlert, NotificationKind, RunSummary
from .orchestrator import PriceAlertRunner
from .rules import condition_met, delivery_window, format_price, format_timestamp

__all__ = [
    "AlertEvaluator",
    "AlertPayload",
    "DueAlert",
    "NotificationDispatcher",
    "NotificationKind",
    "PriceAlertRunner",
    "QuoteProvider",
    "RunSummary",
    "condition_met",
    "delivery_window",
    "format_price",
    "format_timestamp",
]
