"""Process-wide wiring of the database, clients and services."""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from ..config.settings import Settings, get_settings
from ..market.finnhub import FinnhubClient
from ..notifications import Mailer, SMTPEmailTransport
from ..ormdb.database import Database, get_database
from ..services import (
    AlertEvaluator,
    AlertService,
    EngagementService,
    NotificationDispatcher,
    PriceAlertRunner,
    UserService,
    WatchlistService,
)


@dataclass
class AppContext:
    """Everything a request handler or scheduled job needs."""

    settings: Settings
    database: Database
    market_data: FinnhubClient
    mailer: Mailer
    alert_runner: PriceAlertRunner
    alerts: AlertService
    watchlist: WatchlistService
    users: UserService
    engagement: EngagementService


def build_app_context(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    market_data: Optional[FinnhubClient] = None,
    mailer: Optional[Mailer] = None,
) -> AppContext:
    """
    Construct the service graph.

    Any collaborator may be supplied explicitly, which is how tests swap in an
    isolated database, a fake quote source or a recording mailer.
    """
    settings = settings or get_settings()
    database = database or Database.from_settings(settings)

    if market_data is None:
        market_data = FinnhubClient(
            api_key=settings.finnhub_api_key,
            base_url=settings.finnhub_base_url,
            timeout_seconds=settings.market_data_timeout_seconds,
            cache_ttl_seconds=settings.market_data_cache_seconds,
            max_news_articles=settings.news_max_articles,
        )

    if mailer is None:
        transport = SMTPEmailTransport(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_password,
            sender_name=settings.email_sender_name,
            use_tls=settings.smtp_use_tls,
            timeout_seconds=settings.smtp_timeout_seconds,
        )
        mailer = Mailer(transport, dashboard_url=settings.dashboard_url)

    evaluator = AlertEvaluator(database, market_data, NotificationDispatcher(mailer))
    users = UserService(database, mailer)

    return AppContext(
        settings=settings,
        database=database,
        market_data=market_data,
        mailer=mailer,
        alert_runner=PriceAlertRunner(
            database, evaluator, max_concurrency=settings.alert_max_concurrency
        ),
        alerts=AlertService(database),
        watchlist=WatchlistService(database, market_data),
        users=users,
        engagement=EngagementService(
            database,
            market_data,
            mailer,
            users,
            max_articles=settings.news_max_articles,
        ),
    )


@lru_cache()
def get_app_context() -> AppContext:
    """Get the process-wide application context."""
    return build_app_context(database=get_database())
