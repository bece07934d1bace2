"""Repository for user lookups and engagement tracking."""

import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import and_, or_

from ..models import User
from .base import BaseRepository


class UserRepository(BaseRepository):
    """Repository for user operations."""

    def add_user(
        self,
        email: str,
        name: Optional[str] = None,
        external_id: Optional[str] = None,
        **profile: Optional[str],
    ) -> User:
        """Create a user record."""
        user = User(email=email.strip(), name=name, external_id=external_id, **profile)

        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)

        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email address."""
        if not email:
            return None
        return self.session.query(User).filter(User.email == email.strip()).first()

    def resolve_emails(self, user_ids: Iterable[str]) -> Dict[str, str]:
        """
        Resolve owner ids to email addresses in one batch.

        Lookup order: ``external_id`` first, then the legacy integer ``id``
        for ids still unresolved. An external-id match always wins.

        Returns:
            Mapping of owner id to email; unresolvable ids are omitted
        """
        wanted = {str(user_id) for user_id in user_ids if user_id}
        if not wanted:
            return {}

        resolved: Dict[str, str] = {}

        rows = (
            self.session.query(User.external_id, User.email)
            .filter(User.external_id.in_(wanted))
            .all()
        )
        for external_id, email in rows:
            if email:
                resolved[external_id] = email

        legacy_ids = {
            int(user_id)
            for user_id in wanted - resolved.keys()
            if user_id.isdigit()
        }
        if legacy_ids:
            rows = (
                self.session.query(User.id, User.email)
                .filter(User.id.in_(legacy_ids))
                .all()
            )
            for user_id, email in rows:
                if email:
                    resolved[str(user_id)] = email

        return resolved

    def update_last_visit(self, email: str, visited_at: datetime.datetime) -> bool:
        """Record a user's most recent visit."""
        user = self.get_user_by_email(email)
        if user is None:
            return False
        user.last_visit = visited_at
        self.session.commit()
        return True

    def get_users_for_news(self) -> List[User]:
        """Get users that can receive the daily news digest."""
        return (
            self.session.query(User)
            .filter(and_(User.email.isnot(None), User.name.isnot(None), User.name != ""))
            .order_by(User.id)
            .all()
        )

    def get_inactive_users(self, cutoff: datetime.datetime) -> List[User]:
        """Get named users who never visited or last visited before ``cutoff``."""
        return (
            self.session.query(User)
            .filter(
                and_(
                    User.email.isnot(None),
                    User.name.isnot(None),
                    or_(User.last_visit.is_(None), User.last_visit < cutoff),
                )
            )
            .order_by(User.id)
            .all()
        )
