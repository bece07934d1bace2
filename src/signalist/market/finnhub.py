"""Finnhub market data client."""

import asyncio
import math
import time
from datetime import date, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import aiohttp

from ..config.logging import get_logger
from .models import NewsArticle, Quote, SymbolMatch

logger = get_logger(__name__)


class ResponseCache:
    """Time-bounded cache for slow-moving provider responses."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Tuple[str, str], Tuple[float, Any]] = {}

    def get(self, key: Tuple[str, str]) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: Tuple[str, str], value: Any) -> None:
        self._entries[key] = (self._clock() + self.ttl_seconds, value)


class FinnhubClient:
    """
    Client for the Finnhub REST API.

    Every lookup returns ``None`` (or an empty list) instead of raising: a
    missing API key, an HTTP error, a timeout and an unknown symbol all look
    the same to callers. Quotes are always fetched fresh; company profiles
    and financials are cached for ``cache_ttl_seconds``.
    """

    BASE_URL = "https://finnhub.io/api/v1"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = BASE_URL,
        timeout_seconds: float = 10.0,
        cache_ttl_seconds: float = 3600,
        max_news_articles: int = 6,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.max_news_articles = max_news_articles
        self.cache = ResponseCache(cache_ttl_seconds)
        self.logger = logger.bind(client="finnhub")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Optional[Any]:
        """Issue one GET request and decode the JSON body, or return None."""
        if not self.api_key:
            self.logger.debug("Finnhub API key not configured", path=path)
            return None

        url = f"{self.base_url}{path}"
        query = {**params, "token": self.api_key}

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(url, params=query) as response:
                    if response.status != 200:
                        self.logger.warning(
                            "Finnhub request failed",
                            path=path,
                            status=response.status,
                            symbol=params.get("symbol"),
                        )
                        return None
                    return await response.json()
        except Exception as e:
            self.logger.warning(
                "Finnhub request error",
                path=path,
                symbol=params.get("symbol"),
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    async def get_quote(self, symbol: str) -> Optional[Quote]:
        """
        Get the latest trade price for a symbol.

        Args:
            symbol: Ticker symbol (e.g. 'AAPL')

        Returns:
            Quote, or None when no usable price is available
        """
        if not symbol or not symbol.strip():
            return None

        symbol = symbol.strip().upper()
        payload = await self._get_json("/quote", {"symbol": symbol})

        if not isinstance(payload, dict):
            return None

        price = payload.get("c")
        # Finnhub answers unknown symbols with c=0
        if not isinstance(price, (int, float)) or not math.isfinite(price) or not price:
            self.logger.info("No price available", symbol=symbol)
            return None

        try:
            return Quote.from_finnhub(symbol, payload)
        except ValueError as e:
            self.logger.warning("Malformed quote payload", symbol=symbol, error=str(e))
            return None

    async def _get_cached(self, kind: str, symbol: str, path: str, params: Dict[str, Any]):
        key = (kind, symbol)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        payload = await self._get_json(path, params)
        if isinstance(payload, dict) and payload:
            self.cache.set(key, payload)
            return payload
        return None

    async def get_profile(self, symbol: str) -> Optional[Dict[str, Any]]:
        """Get the company profile (name, market capitalization in millions, ...)."""
        symbol = symbol.strip().upper()
        return await self._get_cached(
            "profile", symbol, "/stock/profile2", {"symbol": symbol}
        )

    async def get_financials(self, symbol: str) -> Optional[Dict[str, Any]]:
        """Get basic financial metrics (``metric`` holds P/E and friends)."""
        symbol = symbol.strip().upper()
        return await self._get_cached(
            "financials", symbol, "/stock/metric", {"symbol": symbol, "metric": "all"}
        )

    async def search_symbols(self, query: str) -> List[SymbolMatch]:
        """Search for symbols matching a free-text query."""
        if not query or not query.strip():
            return []

        payload = await self._get_json("/search", {"q": query.strip()})
        if not isinstance(payload, dict):
            return []

        matches = []
        for row in payload.get("result") or []:
            if not row.get("symbol"):
                continue
            matches.append(
                SymbolMatch(
                    symbol=row["symbol"],
                    description=row.get("description") or "",
                    display_symbol=row.get("displaySymbol") or row["symbol"],
                    type=row.get("type") or "",
                )
            )
        return matches

    async def get_company_news(
        self, symbol: str, days_back: int = 5, today: Optional[date] = None
    ) -> List[NewsArticle]:
        """Get recent news for one company."""
        today = today or date.today()
        payload = await self._get_json(
            "/company-news",
            {
                "symbol": symbol.strip().upper(),
                "from": (today - timedelta(days=days_back)).isoformat(),
                "to": today.isoformat(),
            },
        )
        return _parse_articles(payload)

    async def get_market_news(self) -> List[NewsArticle]:
        """Get general market news."""
        payload = await self._get_json("/news", {"category": "general"})
        return _parse_articles(payload)

    async def get_news(self, symbols: Optional[Sequence[str]] = None) -> List[NewsArticle]:
        """
        Get up to ``max_news_articles`` articles.

        With symbols, articles are taken round-robin across the symbols' company
        news so one busy ticker cannot crowd out the rest. Without symbols (or
        when none of them has news) general market news is used.
        """
        limit = self.max_news_articles
        cleaned = list(dict.fromkeys(s.strip().upper() for s in symbols or [] if s and s.strip()))

        if cleaned:
            per_symbol = await asyncio.gather(
                *(self.get_company_news(symbol) for symbol in cleaned)
            )
            picked = _round_robin(per_symbol, limit)
            if picked:
                return picked

        return _dedupe(await self.get_market_news())[:limit]


def _parse_articles(payload: Any) -> List[NewsArticle]:
    if not isinstance(payload, list):
        return []

    articles = []
    for row in payload:
        if not isinstance(row, dict) or not row.get("headline") or not row.get("url"):
            continue
        try:
            articles.append(NewsArticle.model_validate(row))
        except ValueError:
            continue
    return articles


def _dedupe(articles: List[NewsArticle]) -> List[NewsArticle]:
    seen = set()
    unique = []
    for article in articles:
        if article.dedupe_key in seen:
            continue
        seen.add(article.dedupe_key)
        unique.append(article)
    return unique


def _round_robin(groups: Sequence[List[NewsArticle]], limit: int) -> List[NewsArticle]:
    seen = set()
    picked: List[NewsArticle] = []
    cursors = [0] * len(groups)

    while len(picked) < limit:
        progressed = False
        for index, group in enumerate(groups):
            while cursors[index] < len(group):
                article = group[cursors[index]]
                cursors[index] += 1
                if article.dedupe_key in seen:
                    continue
                seen.add(article.dedupe_key)
                picked.append(article)
                progressed = True
                break
            if len(picked) >= limit:
                break
        if not progressed:
            break

    return picked
