"""User sign-up and visit tracking."""

from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from ..config.logging import get_logger, log_audit_event
from ..exceptions import ValidationException
from ..notifications import Mailer, build_welcome_intro
from ..ormdb.database import Database
from ..ormdb.models import User, utcnow
from ..ormdb.repositories import UserRepository

logger = get_logger(__name__)


@dataclass
class Registration:
    user: User
    welcome_sent: bool


class UserService:
    """Service for the user directory."""

    def __init__(self, database: Database, mailer: Mailer):
        self.database = database
        self.mailer = mailer
        self.logger = logger.bind(service="user_service")

    async def register_user(
        self,
        email: str,
        name: str,
        external_id: Optional[str] = None,
        country: Optional[str] = None,
        investment_goals: Optional[str] = None,
        risk_tolerance: Optional[str] = None,
        preferred_industry: Optional[str] = None,
    ) -> Registration:
        """
        Create a user and send the welcome email.

        The user is kept even if the welcome email cannot be sent.

        Raises:
            ValidationException: the email or external id is already registered
        """
        if not email or "@" not in email:
            raise ValidationException("Invalid email address", {"email": "invalid"})

        try:
            with self.database.session_scope() as session:
                user = UserRepository(session).add_user(
                    email=email,
                    name=name,
                    external_id=external_id,
                    country=country,
                    investment_goals=investment_goals,
                    risk_tolerance=risk_tolerance,
                    preferred_industry=preferred_industry,
                )
        except IntegrityError as e:
            raise ValidationException(
                "User already registered", {"email": "already registered"}
            ) from e

        log_audit_event("user_registered", user_id=user.preferred_id)

        intro = build_welcome_intro(
            country=country,
            investment_goals=investment_goals,
            risk_tolerance=risk_tolerance,
            preferred_industry=preferred_industry,
        )

        try:
            await self.mailer.send_welcome_email(user.email, user.name or user.email, intro)
            welcome_sent = True
        except Exception as e:
            self.logger.error(
                "Failed to send welcome email", user_id=user.preferred_id, error=str(e)
            )
            welcome_sent = False

        return Registration(user=user, welcome_sent=welcome_sent)

    async def record_visit(self, email: str) -> bool:
        with self.database.session_scope() as session:
            return UserRepository(session).update_last_visit(email, utcnow())

    async def users_for_news(self) -> List[User]:
        with self.database.session_scope() as session:
            return UserRepository(session).get_users_for_news()

    async def inactive_users(self, days: int = 15) -> List[User]:
        """Users who never visited, or whose last visit is older than ``days``."""
        cutoff = utcnow() - timedelta(days=days)
        with self.database.session_scope() as session:
            return UserRepository(session).get_inactive_users(cutoff)
