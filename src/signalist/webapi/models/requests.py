"""Request models for the Signalist API."""

import math
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field, field_validator

from ...ormdb.models import AlertCondition, AlertFrequency


def _normalize_symbol(v: str) -> str:
    v = v.strip().upper()
    if not v:
        raise ValueError("Symbol must not be empty")
    return v


def _finite(v: float) -> float:
    if not math.isfinite(v):
        raise ValueError("Threshold must be a finite number")
    return v


Symbol = Annotated[str, Field(min_length=1, max_length=16), AfterValidator(_normalize_symbol)]
Threshold = Annotated[float, AfterValidator(_finite)]


class AlertCreateRequest(BaseModel):
    """Request model for creating a price alert."""

    symbol: Symbol = Field(..., description="Stock symbol to monitor")
    company: str = Field(..., description="Company display name", min_length=1)
    alert_name: str = Field(..., description="User label for the alert", min_length=1)
    condition: AlertCondition = Field(..., description="greater or less")
    threshold: Threshold = Field(..., description="Price threshold")
    frequency: AlertFrequency = Field(AlertFrequency.DAY, description="day, week or month")


class AlertUpdateRequest(BaseModel):
    """Request model for a partial alert update."""

    symbol: Optional[Symbol] = None
    company: Optional[str] = Field(None, min_length=1)
    alert_name: Optional[str] = Field(None, min_length=1)
    condition: Optional[AlertCondition] = None
    threshold: Optional[Threshold] = None
    frequency: Optional[AlertFrequency] = None

    def changes(self) -> dict:
        """Fields set in the request, with enums as plain values."""
        return self.model_dump(exclude_none=True, mode="json")


class WatchlistAddRequest(BaseModel):
    """Request model for adding a symbol to the watchlist."""

    symbol: Symbol
    company: Optional[str] = Field(None, description="Company display name")


class WatchlistStatusRequest(BaseModel):
    """Symbols to check against the watchlist."""

    symbols: List[str] = Field(..., description="Symbols to check", max_length=100)


class UserRegistrationRequest(BaseModel):
    """Sign-up data forwarded by the auth layer."""

    email: str = Field(..., min_length=3, max_length=254)
    name: str = Field(..., min_length=1, max_length=200)
    external_id: Optional[str] = Field(None, description="Identifier issued by the auth layer")
    country: Optional[str] = None
    investment_goals: Optional[str] = None
    risk_tolerance: Optional[str] = None
    preferred_industry: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        """Reject values that are not email-shaped."""
        v = v.strip()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class HealthCheckRequest(BaseModel):
    """Request model for the detailed health check."""

    include_services: bool = Field(True, description="Include database and provider checks")
