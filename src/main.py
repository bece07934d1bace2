"""
Signalist - Main application entry point.

Serves the watchlist and alert API and runs the scheduled price alert,
news digest and inactive-user email jobs.
"""

import asyncio
import sys

import uvicorn
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from signalist.config.logging import get_logger
from signalist.config.settings import get_required_env_vars, get_settings
from signalist.core.context import get_app_context
from signalist.core.price_alerts import run_price_alerts
from signalist.scheduler import (
    add_inactive_user_job,
    add_news_summary_job,
    add_price_alert_jobs,
    list_scheduled_jobs,
    shutdown_scheduler,
    start_scheduler,
)
from signalist.utils.config import initialize_application, validate_environment


def run_once(argv) -> None:
    """Run a single job in the foreground and print its result."""
    logger = get_logger(__name__)
    context = get_app_context()

    if "-alerts" in argv:
        try:
            cadence = argv[argv.index("-alerts") + 1]
        except IndexError:
            print("Error: please provide a cadence (day, week or month) after -alerts")
            sys.exit(1)

        try:
            summary = asyncio.run(run_price_alerts(cadence, context))
        except ValueError as e:
            logger.error("Invalid cadence", cadence=cadence, error=str(e))
            print(f"Error: unknown cadence '{cadence}'")
            sys.exit(1)
        print(summary.to_dict())
    elif "-news" in argv:
        print(asyncio.run(context.engagement.send_daily_news_summary()))
    elif "-inactive" in argv:
        print(
            asyncio.run(
                context.engagement.send_inactive_user_reminders(
                    context.settings.inactive_user_days
                )
            )
        )
    else:
        print("Usage: python src/main.py -once [-alerts day|week|month | -news | -inactive]")
        sys.exit(1)


def main() -> None:
    """Main application entry point."""
    # Initialize application (logging, config, database)
    initialize_application()

    logger = get_logger(__name__)
    logger.info("Starting Signalist application")

    settings = get_settings()

    if not validate_environment():
        logger.error("Environment validation failed")
        print(
            "Please set the required environment variables before running the application."
        )
        print(f"Expected variables: {', '.join(get_required_env_vars())}")
        sys.exit(1)

    logger.info("Environment validation passed")

    if "-once" in sys.argv:
        run_once(sys.argv)
        return

    logger.info(
        "Starting production mode",
        host=settings.endpoint_host,
        port=settings.endpoint_port,
        alert_hour=settings.alert_hour,
    )
    print("Starting Signalist...")

    start_scheduler()
    add_price_alert_jobs()
    add_news_summary_job()
    add_inactive_user_job()
    for job in list_scheduled_jobs():
        logger.info("Scheduled job", **job)

    try:
        uvicorn.run(
            "signalist.webapi.app:app",
            host=settings.endpoint_host,
            port=settings.endpoint_port,
            reload=settings.api_reload,
            log_level=settings.api_log_level.lower(),
        )
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
        print("\nShutting down...")
    finally:
        logger.info("Shutting down scheduler")
        shutdown_scheduler()


if __name__ == "__main__":
    main()
