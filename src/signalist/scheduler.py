"""Scheduler configuration using SQLAlchemy job store."""

from typing import Any, Dict, List, Optional

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, EVENT_JOB_MISSED
from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.jobstores.base import JobLookupError
from apscheduler.jobstores.sqlalchemy import SQLAlchemyJobStore
from apscheduler.schedulers.background import BackgroundScheduler

from .config.logging import get_logger
from .config.settings import Settings, get_settings

logger = get_logger(__name__)

PRICE_ALERT_JOBS = {
    "day": (
        "price_alerts_daily",
        "Daily Price Alerts",
        "signalist.core.price_alerts:run_daily_price_alerts",
    ),
    "week": (
        "price_alerts_weekly",
        "Weekly Price Alerts",
        "signalist.core.price_alerts:run_weekly_price_alerts",
    ),
    "month": (
        "price_alerts_monthly",
        "Monthly Price Alerts",
        "signalist.core.price_alerts:run_monthly_price_alerts",
    ),
}

NEWS_SUMMARY_JOB_ID = "daily_news_summary"
INACTIVE_USER_JOB_ID = "inactive_user_reminders"


def create_scheduler(
    database_url: Optional[str] = None, max_workers: Optional[int] = None
) -> BackgroundScheduler:
    """
    Create and configure a BackgroundScheduler with SQLAlchemy job store.

    Args:
        database_url: Job store URL; defaults to the application database
        max_workers: Thread pool size; defaults to settings

    Returns:
        Configured BackgroundScheduler instance
    """
    settings = get_settings()

    # Jobs live in the same database as the application data
    jobstores = {
        "default": SQLAlchemyJobStore(
            url=database_url or settings.get_database_url(), tablename="apscheduler_jobs"
        )
    }

    executors = {
        "default": ThreadPoolExecutor(max_workers=max_workers or settings.scheduler_max_workers)
    }

    job_defaults = {
        "coalesce": True,  # A late run covers every missed tick of its cadence
        "max_instances": 1,  # A cadence never overlaps itself
        "misfire_grace_time": 300,
    }

    scheduler = BackgroundScheduler(
        jobstores=jobstores,
        executors=executors,
        job_defaults=job_defaults,
        timezone="UTC",
    )

    scheduler.add_listener(job_executed_listener, EVENT_JOB_EXECUTED)
    scheduler.add_listener(job_error_listener, EVENT_JOB_ERROR)
    scheduler.add_listener(job_missed_listener, EVENT_JOB_MISSED)

    return scheduler


def job_executed_listener(event):
    """Log successful job executions."""
    logger.info(
        "Scheduled job executed",
        job_id=event.job_id,
        scheduled_run_time=str(event.scheduled_run_time),
    )


def job_error_listener(event):
    """Log job execution errors."""
    logger.error(
        "Scheduled job crashed",
        job_id=event.job_id,
        error=str(event.exception),
        traceback=event.traceback,
    )


def job_missed_listener(event):
    logger.warning(
        "Scheduled job missed", job_id=event.job_id, scheduled_run_time=str(event.scheduled_run_time)
    )


def get_global_scheduler() -> BackgroundScheduler:
    """
    Get or create the global scheduler instance.

    Returns:
        Global BackgroundScheduler instance
    """
    if not hasattr(get_global_scheduler, "_scheduler"):
        get_global_scheduler._scheduler = create_scheduler()

    return get_global_scheduler._scheduler


def start_scheduler(scheduler: Optional[BackgroundScheduler] = None):
    """Start the scheduler."""
    scheduler = scheduler or get_global_scheduler()
    if not scheduler.running:
        scheduler.start()
        logger.info("Scheduler started with SQLAlchemy job store")


def shutdown_scheduler(scheduler: Optional[BackgroundScheduler] = None):
    """Shutdown the scheduler."""
    scheduler = scheduler or get_global_scheduler()
    if scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Scheduler shutdown complete")


def _remove_job(scheduler: BackgroundScheduler, job_id: str) -> None:
    try:
        scheduler.remove_job(job_id)
    except JobLookupError:
        pass


def add_price_alert_jobs(
    scheduler: Optional[BackgroundScheduler] = None, settings: Optional[Settings] = None
) -> List[str]:
    """
    Register the daily, weekly and monthly price alert jobs.

    Daily runs every day, weekly on the configured weekday and monthly on the
    configured day of the month, all at the configured UTC hour.

    Returns:
        The registered job ids
    """
    scheduler = scheduler or get_global_scheduler()
    settings = settings or get_settings()

    triggers: Dict[str, Dict[str, Any]] = {
        "day": {"hour": settings.alert_hour, "minute": 0},
        "week": {
            "day_of_week": settings.alert_weekly_day,
            "hour": settings.alert_hour,
            "minute": 0,
        },
        "month": {"day": settings.alert_monthly_day, "hour": settings.alert_hour, "minute": 0},
    }

    job_ids = []
    for cadence, (job_id, name, func) in PRICE_ALERT_JOBS.items():
        _remove_job(scheduler, job_id)
        scheduler.add_job(
            func=func,
            trigger="cron",
            id=job_id,
            name=name,
            replace_existing=True,
            **triggers[cadence],
        )
        job_ids.append(job_id)

    logger.info(
        "Added price alert jobs",
        hour=settings.alert_hour,
        weekly_day=settings.alert_weekly_day,
        monthly_day=settings.alert_monthly_day,
    )
    return job_ids


def add_news_summary_job(
    scheduler: Optional[BackgroundScheduler] = None, hour: Optional[int] = None
) -> str:
    """Register the daily news digest job."""
    scheduler = scheduler or get_global_scheduler()
    hour = get_settings().news_summary_hour if hour is None else hour

    _remove_job(scheduler, NEWS_SUMMARY_JOB_ID)
    scheduler.add_job(
        func="signalist.core.engagement:run_news_summary_sync",
        trigger="cron",
        hour=hour,
        minute=0,
        id=NEWS_SUMMARY_JOB_ID,
        name="Daily News Summary",
        replace_existing=True,
    )

    logger.info("Added news summary job", hour=hour)
    return NEWS_SUMMARY_JOB_ID


def add_inactive_user_job(
    scheduler: Optional[BackgroundScheduler] = None,
    hour: Optional[int] = None,
    interval_days: Optional[int] = None,
) -> str:
    """Register the inactive-user reminder job (every ``interval_days`` days)."""
    scheduler = scheduler or get_global_scheduler()
    settings = get_settings()
    hour = settings.inactive_reminder_hour if hour is None else hour
    interval_days = interval_days or settings.inactive_reminder_interval_days

    _remove_job(scheduler, INACTIVE_USER_JOB_ID)
    scheduler.add_job(
        func="signalist.core.engagement:run_inactive_user_reminders_sync",
        trigger="cron",
        day=f"*/{interval_days}",
        hour=hour,
        minute=0,
        id=INACTIVE_USER_JOB_ID,
        name="Inactive User Reminders",
        replace_existing=True,
    )

    logger.info("Added inactive user job", hour=hour, interval_days=interval_days)
    return INACTIVE_USER_JOB_ID


def list_scheduled_jobs(scheduler: Optional[BackgroundScheduler] = None) -> List[Dict[str, Any]]:
    """List all currently scheduled jobs."""
    scheduler = scheduler or get_global_scheduler()
    return [
        {
            "id": job.id,
            "name": job.name,
            "next_run_time": str(getattr(job, "next_run_time", None)),
        }
        for job in scheduler.get_jobs()
    ]
