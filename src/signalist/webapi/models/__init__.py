"""API request and response models."""

from .requests import (
    AlertCreateRequest,
    AlertUpdateRequest,
    HealthCheckRequest,
    UserRegistrationRequest,
    WatchlistAddRequest,
    WatchlistStatusRequest,
)
from .responses import (
    AlertData,
    AlertListResponse,
    AlertResponse,
    ErrorResponse,
    HealthResponse,
    HealthStatus,
    MessageResponse,
    StatusResponse,
    WatchlistEntryData,
    WatchlistResponse,
)

__all__ = [
    "AlertCreateRequest",
    "AlertData",
    "AlertListResponse",
    "AlertResponse",
    "AlertUpdateRequest",
    "ErrorResponse",
    "HealthCheckRequest",
    "HealthResponse",
    "HealthStatus",
    "MessageResponse",
    "StatusResponse",
    "UserRegistrationRequest",
    "WatchlistAddRequest",
    "WatchlistEntryData",
    "WatchlistResponse",
    "WatchlistStatusRequest",
]
