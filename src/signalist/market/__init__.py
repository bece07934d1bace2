"""Market data access."""

from .finnhub import FinnhubClient, ResponseCache
from .models import NewsArticle, Quote, SymbolMatch

__all__ = ["FinnhubClient", "NewsArticle", "Quote", "ResponseCache", "SymbolMatch"]
