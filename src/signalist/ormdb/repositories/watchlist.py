"""Repository for watchlist operations."""

from typing import List, Optional

from sqlalchemy import and_

from ..models import WatchlistItem, normalize_symbol
from .base import BaseRepository


class WatchlistRepository(BaseRepository):
    """Repository for watchlist operations."""

    def add_item(self, user_id: str, symbol: str, company: str) -> Optional[WatchlistItem]:
        """
        Add a symbol to a user's watchlist.

        Returns:
            The new item, or None if the symbol is already watched
        """
        if self.get_item(user_id, symbol) is not None:
            return None

        item = WatchlistItem(user_id=user_id, symbol=symbol, company=company)
        self.session.add(item)
        self.session.commit()
        self.session.refresh(item)

        return item

    def get_item(self, user_id: str, symbol: str) -> Optional[WatchlistItem]:
        """Get a watchlist item by owner and symbol."""
        return (
            self.session.query(WatchlistItem)
            .filter(
                and_(
                    WatchlistItem.user_id == user_id,
                    WatchlistItem.symbol == normalize_symbol(symbol),
                )
            )
            .first()
        )

    def remove_item(self, user_id: str, symbol: str) -> bool:
        """Remove a symbol from a user's watchlist."""
        item = self.get_item(user_id, symbol)
        if item is None:
            return False

        self.session.delete(item)
        self.session.commit()
        return True

    def get_items_for_user(self, user_id: str) -> List[WatchlistItem]:
        """Get a user's watchlist, oldest first."""
        return (
            self.session.query(WatchlistItem)
            .filter(WatchlistItem.user_id == user_id)
            .order_by(WatchlistItem.added_at, WatchlistItem.id)
            .all()
        )

    def get_symbols_for_user(self, user_id: str) -> List[str]:
        """Get the list of symbols a user watches."""
        return [item.symbol for item in self.get_items_for_user(user_id)]
