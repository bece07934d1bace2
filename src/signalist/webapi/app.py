"""FastAPI application for the Signalist API."""

import uuid
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..config.logging import get_logger
from ..config.settings import get_settings
from .dependencies import verify_auth_token
from .exceptions import setup_exception_handlers
from .health import router as health_router
from .models.responses import MessageResponse
from .routers import (
    alerts_router,
    jobs_router,
    stocks_router,
    users_router,
    watchlist_router,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logger.info(
        "Starting Signalist API",
        environment=settings.environment,
        market_data_configured=settings.is_market_data_configured(),
        email_configured=settings.is_email_configured(),
    )

    yield

    logger.info("Signalist API shutdown completed")


async def add_request_id_middleware(request: Request, call_next):
    """Add unique request ID to each request for tracking."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    logger.info(
        "Request started",
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        remote_addr=request.client.host if request.client else None,
    )

    response = await call_next(request)

    response.headers["X-Request-ID"] = request_id

    logger.info(
        "Request completed",
        request_id=request_id,
        status_code=response.status_code,
        method=request.method,
        path=request.url.path,
    )

    return response


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Signalist API",
        description="""
        Stock watchlists, price alerts and market news emails.

        ## Features

        * **Price Alerts**: `greater` / `less` thresholds evaluated daily, weekly or monthly
        * **Watchlist**: tracked symbols with live price, change, market cap and P/E
        * **Stock Search**: symbol lookup and current quotes
        * **Emails**: welcome, daily news digest, inactive-user reminders and alert triggers
        """,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.middleware("http")(add_request_id_middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    # Health endpoints stay open for probes
    app.include_router(health_router, prefix="/api/v1", tags=["Health & Status"])

    protected = [Depends(verify_auth_token)]
    app.include_router(
        alerts_router, prefix="/api/v1/alerts", tags=["Price Alerts"], dependencies=protected
    )
    app.include_router(
        watchlist_router, prefix="/api/v1/watchlist", tags=["Watchlist"], dependencies=protected
    )
    app.include_router(
        stocks_router, prefix="/api/v1/stocks", tags=["Stocks"], dependencies=protected
    )
    app.include_router(
        users_router, prefix="/api/v1/users", tags=["Users"], dependencies=protected
    )
    app.include_router(
        jobs_router, prefix="/api/v1/jobs", tags=["Scheduled Jobs"], dependencies=protected
    )

    @app.get(
        "/",
        response_model=MessageResponse,
        summary="API Root Endpoint",
        description="Basic API information",
    )
    async def root(
        request: Request, token: str = Depends(verify_auth_token)
    ) -> MessageResponse:
        return MessageResponse.create(
            message="Signalist API", request_id=request.state.request_id
        )

    logger.info("FastAPI application created")
    return app


# Create the app instance
app = create_app()
