"""Daily news digest and inactive-user reminder runs."""

from datetime import date
from typing import Any, Callable, Dict, List

from ..config.logging import get_logger
from ..market.finnhub import FinnhubClient
from ..market.models import NewsArticle
from ..notifications import Mailer, format_email_date, render_news_content
from ..ormdb.database import Database
from ..ormdb.repositories import WatchlistRepository
from .user_service import UserService

logger = get_logger(__name__)


class EngagementService:
    """Scheduled emails that keep users coming back."""

    def __init__(
        self,
        database: Database,
        market_data: FinnhubClient,
        mailer: Mailer,
        users: UserService,
        today: Callable[[], date] = date.today,
        max_articles: int = 6,
    ):
        self.database = database
        self.market_data = market_data
        self.mailer = mailer
        self.users = users
        self.today = today
        self.max_articles = max_articles
        self.logger = logger.bind(service="engagement")

    async def _articles_for(self, user_id: str) -> List[NewsArticle]:
        with self.database.session_scope() as session:
            symbols = WatchlistRepository(session).get_symbols_for_user(user_id)

        articles = (await self.market_data.get_news(symbols))[: self.max_articles]
        if not articles and symbols:
            articles = (await self.market_data.get_news())[: self.max_articles]
        return articles

    async def send_daily_news_summary(self) -> Dict[str, Any]:
        """
        Email each user a digest of news for their watchlist.

        Users with no watchlist news get general market news. A failure for
        one user is logged and does not stop the others.
        """
        users = await self.users.users_for_news()
        if not users:
            self.logger.info("No users for news summary")
            return {"total_users": 0, "sent": 0, "failed": 0}

        today = format_email_date(self.today())
        sent = failed = 0

        for user in users:
            try:
                articles = await self._articles_for(user.preferred_id)
                await self.mailer.send_news_summary_email(
                    user.email, today, render_news_content(articles)
                )
                sent += 1
            except Exception as e:
                failed += 1
                self.logger.error(
                    "Failed to send news summary",
                    user_id=user.preferred_id,
                    error=str(e),
                    exc_info=True,
                )

        self.logger.info("News summary run complete", total_users=len(users), sent=sent, failed=failed)
        return {"total_users": len(users), "sent": sent, "failed": failed}

    async def send_inactive_user_reminders(self, days: int = 15) -> Dict[str, Any]:
        """Email users who have not visited in ``days`` days."""
        inactive = await self.users.inactive_users(days)
        if not inactive:
            self.logger.info("No inactive users found", days=days)
            return {"total_users": 0, "successful": 0, "failed": 0}

        successful = failed = 0
        for user in inactive:
            try:
                await self.mailer.send_inactive_user_email(user.email, user.name)
                successful += 1
            except Exception as e:
                failed += 1
                self.logger.error(
                    "Failed to send inactive user email",
                    user_id=user.preferred_id,
                    error=str(e),
                )

        self.logger.info(
            "Inactive user reminders sent",
            total_users=len(inactive),
            successful=successful,
            failed=failed,
        )
        return {"total_users": len(inactive), "successful": successful, "failed": failed}
