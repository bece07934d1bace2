"""Per-cadence price alert runs."""

import asyncio
from typing import Dict, List, Optional, Tuple, Union

from sqlalchemy.exc import SQLAlchemyError

from ...config.logging import get_logger
from ...ormdb.database import Database
from ...ormdb.models import AlertFrequency, utcnow
from ...ormdb.repositories import AlertRepository, UserRepository
from .evaluator import AlertEvaluator
from .models import DueAlert, RunSummary

logger = get_logger(__name__)


class PriceAlertRunner:
    """Loads the alerts due at a cadence and evaluates them in isolation."""

    def __init__(
        self,
        database: Database,
        evaluator: AlertEvaluator,
        max_concurrency: int = 5,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.database = database
        self.evaluator = evaluator
        self.max_concurrency = max_concurrency

    def _load(self, cadence: AlertFrequency) -> Tuple[List[DueAlert], Dict[str, str]]:
        with self.database.session_scope() as session:
            alerts = AlertRepository(session).get_alerts_by_frequency(cadence.value)
            due = [DueAlert.from_model(alert) for alert in alerts]
            emails = UserRepository(session).resolve_emails(a.user_id for a in due)
        return due, emails

    async def run(self, cadence: Union[AlertFrequency, str]) -> RunSummary:
        """
        Evaluate every alert at ``cadence``.

        One alert's failure is logged and counted; it never stops the others.
        """
        cadence = AlertFrequency(cadence)
        summary = RunSummary(cadence=cadence, started_at=utcnow())
        log = logger.bind(cadence=cadence.value)

        try:
            due, emails = self._load(cadence)
        except SQLAlchemyError as e:
            log.error("Failed to load alerts for run", error=str(e), exc_info=True)
            summary.finished_at = utcnow()
            return summary

        summary.total = len(due)
        log.info("Starting price alert run", alerts=summary.total)

        resolved: List[Tuple[DueAlert, str]] = []
        for alert in due:
            email: Optional[str] = emails.get(alert.user_id)
            if not email:
                summary.unresolved += 1
                log.warning("Alert owner not found", alert_id=alert.id, user_id=alert.user_id)
                continue
            resolved.append((alert, email))

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def evaluate(alert: DueAlert, email: str) -> bool:
            async with semaphore:
                return await self.evaluator.evaluate(alert, email)

        results = await asyncio.gather(
            *(evaluate(alert, email) for alert, email in resolved),
            return_exceptions=True,
        )

        for (alert, _), result in zip(resolved, results):
            if isinstance(result, Exception):
                summary.failed += 1
                summary.errors[alert.id] = str(result)
                log.error(
                    "Alert evaluation failed",
                    alert_id=alert.id,
                    symbol=alert.symbol,
                    error=str(result),
                    exc_info=result,
                )
            elif result:
                summary.triggered += 1
            else:
                summary.skipped += 1

        summary.finished_at = utcnow()
        log.info(
            "Price alert run complete",
            total=summary.total,
            triggered=summary.triggered,
            skipped=summary.skipped,
            unresolved=summary.unresolved,
            failed=summary.failed,
        )
        return summary
