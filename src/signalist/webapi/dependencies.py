"""Shared FastAPI dependencies."""

from fastapi import Depends, Header, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config.logging import get_logger
from ..config.settings import get_settings
from ..core.context import AppContext, get_app_context
from ..services import AlertService, EngagementService, UserService, WatchlistService

logger = get_logger(__name__)

# Security scheme for Bearer token authentication
security = HTTPBearer()


def verify_auth_token(
    credentials: HTTPAuthorizationCredentials = Security(security),
) -> str:
    """
    Verify the authentication token.

    Args:
        credentials: The HTTP authorization credentials

    Returns:
        The token if valid

    Raises:
        HTTPException: If token is invalid
    """
    expected_token = get_settings().endpoint_auth_token
    if not expected_token:
        logger.error("Endpoint auth token not configured")
        raise HTTPException(detail="ENDPOINT_AUTH_TOKEN not configured", status_code=500)

    if credentials.credentials != expected_token:
        logger.warning(
            "Invalid authentication attempt",
            provided_token_length=len(credentials.credentials),
        )
        raise HTTPException(status_code=401, detail="Invalid authentication token")

    return credentials.credentials


def get_current_user_email(x_user_email: str = Header(..., alias="X-User-Email")) -> str:
    """Email of the signed-in user, forwarded by the auth layer."""
    email = x_user_email.strip()
    if not email or "@" not in email:
        raise HTTPException(status_code=401, detail="Missing or invalid user identity")
    return email


def get_context() -> AppContext:
    return get_app_context()


def get_alert_service(context: AppContext = Depends(get_context)) -> AlertService:
    return context.alerts


def get_watchlist_service(context: AppContext = Depends(get_context)) -> WatchlistService:
    return context.watchlist


def get_user_service(context: AppContext = Depends(get_context)) -> UserService:
    return context.users


def get_engagement_service(context: AppContext = Depends(get_context)) -> EngagementService:
    return context.engagement
