"""Watchlist management and live watchlist data."""

import asyncio
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ..config.logging import get_logger
from ..exceptions import ValidationException
from ..market.finnhub import FinnhubClient
from ..ormdb.database import Database
from ..ormdb.models import WatchlistItem, normalize_symbol
from ..ormdb.repositories import UserRepository, WatchlistRepository

logger = get_logger(__name__)

NOT_AVAILABLE = "N/A"


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if math.isfinite(value) else None


def format_price(value: Optional[float]) -> str:
    value = _number(value)
    return f"${value:.2f}" if value else NOT_AVAILABLE


def format_change_percent(value: Optional[float]) -> str:
    value = _number(value)
    return f"{value:+.2f}%" if value is not None else NOT_AVAILABLE


def format_market_cap(millions: Optional[float]) -> str:
    """Format a market capitalization given in millions of dollars."""
    millions = _number(millions)
    if not millions or millions <= 0:
        return NOT_AVAILABLE
    if millions >= 1e6:
        return f"${millions / 1e6:.1f}T"
    if millions >= 1e3:
        return f"${millions / 1e3:.1f}B"
    return f"${millions:.1f}M"


def format_pe_ratio(value: Optional[float]) -> str:
    value = _number(value)
    return f"{value:.2f}" if value is not None else NOT_AVAILABLE


@dataclass
class WatchlistEntry:
    """A watchlist item joined with live market data."""

    symbol: str
    company: str
    added_at: datetime
    current_price: Optional[float] = None
    change_percent: Optional[float] = None
    price_formatted: str = NOT_AVAILABLE
    change_formatted: str = NOT_AVAILABLE
    market_cap: str = NOT_AVAILABLE
    pe_ratio: str = NOT_AVAILABLE


class WatchlistService:
    """Service for a user's watchlist."""

    def __init__(self, database: Database, market_data: FinnhubClient):
        self.database = database
        self.market_data = market_data
        self.logger = logger.bind(service="watchlist_service")

    def _user_id(self, session, email: str) -> Optional[str]:
        user = UserRepository(session).get_user_by_email(email)
        return user.preferred_id if user is not None else None

    async def add(self, email: str, symbol: str, company: Optional[str] = None) -> bool:
        """
        Add a symbol to the user's watchlist.

        Returns:
            False if the user is unknown or the symbol is already watched
        """
        try:
            symbol = normalize_symbol(symbol)
        except ValueError as e:
            raise ValidationException(str(e), {"symbol": str(e)}) from e

        with self.database.session_scope() as session:
            user_id = self._user_id(session, email)
            if user_id is None:
                return False
            item = WatchlistRepository(session).add_item(
                user_id, symbol, (company or "").strip() or symbol
            )

        if item is None:
            return False
        self.logger.info("Symbol added to watchlist", symbol=symbol)
        return True

    async def remove(self, email: str, symbol: str) -> bool:
        try:
            symbol = normalize_symbol(symbol)
        except ValueError:
            return False

        with self.database.session_scope() as session:
            user_id = self._user_id(session, email)
            if user_id is None:
                return False
            removed = WatchlistRepository(session).remove_item(user_id, symbol)

        if removed:
            self.logger.info("Symbol removed from watchlist", symbol=symbol)
        return removed

    async def items(self, email: str) -> List[WatchlistItem]:
        with self.database.session_scope() as session:
            user_id = self._user_id(session, email)
            if user_id is None:
                return []
            return WatchlistRepository(session).get_items_for_user(user_id)

    async def symbols(self, email: str) -> List[str]:
        """Symbols the user watches; empty for unknown users."""
        return [item.symbol for item in await self.items(email)]

    async def status(self, email: str, symbols: Iterable[str]) -> Dict[str, bool]:
        """Map each requested symbol to whether the user watches it."""
        watched = set(await self.symbols(email))
        result = {}
        for symbol in symbols:
            if symbol and symbol.strip():
                key = symbol.strip().upper()
                result[key] = key in watched
        return result

    async def _enrich(self, item: WatchlistItem) -> WatchlistEntry:
        entry = WatchlistEntry(symbol=item.symbol, company=item.company, added_at=item.added_at)

        quote, profile, financials = await asyncio.gather(
            self.market_data.get_quote(item.symbol),
            self.market_data.get_profile(item.symbol),
            self.market_data.get_financials(item.symbol),
            return_exceptions=True,
        )

        if quote is not None and not isinstance(quote, Exception):
            entry.current_price = quote.current_price
            entry.change_percent = quote.change_percent
            entry.price_formatted = format_price(quote.current_price)
            entry.change_formatted = format_change_percent(quote.change_percent)

        if isinstance(profile, dict):
            entry.market_cap = format_market_cap(profile.get("marketCapitalization"))

        if isinstance(financials, dict):
            metric = financials.get("metric") or {}
            entry.pe_ratio = format_pe_ratio(metric.get("peBasicExclExtraTTM"))

        for name, result in (("quote", quote), ("profile", profile), ("financials", financials)):
            if isinstance(result, Exception):
                self.logger.warning(
                    "Market data lookup failed", symbol=item.symbol, lookup=name, error=str(result)
                )

        return entry

    async def with_data(self, email: str) -> List[WatchlistEntry]:
        """The user's watchlist with price, change, market cap and P/E."""
        items = await self.items(email)
        if not items:
            return []
        return list(await asyncio.gather(*(self._enrich(item) for item in items)))
