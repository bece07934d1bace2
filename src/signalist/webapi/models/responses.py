"""Response models for the Signalist API."""

from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer

# Generic type for data responses
T = TypeVar("T")


class BaseResponse(BaseModel):
    """Base response model for all API responses."""

    success: bool = Field(..., description="Whether the request was successful")
    timestamp: datetime = Field(
        default_factory=datetime.utcnow, description="Response timestamp"
    )
    request_id: Optional[str] = Field(
        None, description="Unique request identifier for tracking"
    )

    model_config = ConfigDict(use_enum_values=True)

    @field_serializer("timestamp")
    def serialize_timestamp(self, dt: datetime) -> str:
        """Serialize datetime to ISO format with Z suffix."""
        return dt.isoformat() + "Z"


class SuccessResponse(BaseResponse, Generic[T]):
    """Generic success response with typed data."""

    success: bool = Field(True, description="Always true for success responses")
    data: T = Field(..., description="Response data")
    message: Optional[str] = Field(None, description="Optional success message")


class ErrorResponse(BaseResponse):
    """Error response model."""

    success: bool = Field(False, description="Always false for error responses")
    error: Dict[str, Any] = Field(..., description="Error details")


class HealthStatus(BaseModel):
    """Health status model."""

    status: str = Field(
        ..., description="Overall health status: healthy, degraded, unhealthy"
    )
    services: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict, description="Individual service statuses"
    )
    uptime_seconds: float = Field(..., description="Application uptime in seconds")
    version: Optional[str] = Field(None, description="Application version")


class HealthResponse(BaseResponse):
    """Health check response."""

    success: bool = Field(True, description="Always true for health responses")
    health: HealthStatus = Field(..., description="Detailed health information")


class AlertData(BaseModel):
    """A price alert as returned to its owner."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    symbol: str
    company: str
    alert_name: str
    alert_type: str = "price"
    condition: str
    threshold: float
    frequency: str
    created_at: Optional[datetime] = None
    last_triggered_at: Optional[datetime] = None


class AlertResponse(SuccessResponse[AlertData]):
    """Response model for a single alert."""

    data: AlertData = Field(..., description="Alert data")


class AlertListResponse(SuccessResponse[List[AlertData]]):
    """Response model for the alert list."""

    data: List[AlertData] = Field(..., description="Alerts, newest first")


class WatchlistEntryData(BaseModel):
    """A watchlist row with formatted market data."""

    model_config = ConfigDict(from_attributes=True)

    symbol: str
    company: str
    added_at: Optional[datetime] = None
    current_price: Optional[float] = None
    change_percent: Optional[float] = None
    price_formatted: str = "N/A"
    change_formatted: str = "N/A"
    market_cap: str = "N/A"
    pe_ratio: str = "N/A"


class WatchlistResponse(SuccessResponse[List[WatchlistEntryData]]):
    """Response model for the enriched watchlist."""

    data: List[WatchlistEntryData] = Field(..., description="Watchlist with market data")


class MessageResponse(SuccessResponse[Dict[str, str]]):
    """Simple message response."""

    data: Dict[str, str] = Field(..., description="Message data")

    @classmethod
    def create(
        cls, message: str, request_id: Optional[str] = None
    ) -> "MessageResponse":
        """Create a simple message response."""
        return cls(
            success=True,
            data={"message": message},
            message=message,
            request_id=request_id,
        )


class StatusResponse(SuccessResponse[Dict[str, Any]]):
    """Generic status response."""

    data: Dict[str, Any] = Field(..., description="Status data")

    @classmethod
    def create(
        cls,
        data: Dict[str, Any],
        message: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> "StatusResponse":
        """Create a status response."""
        return cls(success=True, data=data, message=message, request_id=request_id)
