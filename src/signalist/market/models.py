"""Market data models."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class Quote(BaseModel):
    """Latest trade price for a symbol at fetch time."""

    symbol: str
    current_price: float
    change: Optional[float] = None
    change_percent: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    open: Optional[float] = None
    previous_close: Optional[float] = None
    fetched_at: datetime = Field(default_factory=datetime.utcnow)

    @classmethod
    def from_finnhub(cls, symbol: str, payload: Dict[str, Any]) -> "Quote":
        """Build a quote from a Finnhub ``/quote`` response."""
        return cls(
            symbol=symbol,
            current_price=payload["c"],
            change=payload.get("d"),
            change_percent=payload.get("dp"),
            high=payload.get("h"),
            low=payload.get("l"),
            open=payload.get("o"),
            previous_close=payload.get("pc"),
        )


class NewsArticle(BaseModel):
    """A market or company news item."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    headline: str
    summary: str = ""
    source: str = ""
    url: str = ""
    published_at: Optional[int] = Field(None, alias="datetime")
    related: str = ""
    image: str = ""

    @property
    def dedupe_key(self) -> str:
        return str(self.id) if self.id is not None else f"{self.url}|{self.headline}"


class SymbolMatch(BaseModel):
    """A result from the symbol search endpoint."""

    symbol: str
    description: str = ""
    display_symbol: str = ""
    type: str = ""
