"""Watchlist endpoints for the signed-in user."""

from fastapi import APIRouter, Depends, Request

from ...config.logging import get_logger
from ...exceptions import NotFoundError
from ...services import WatchlistService
from ..dependencies import get_current_user_email, get_watchlist_service
from ..models.requests import WatchlistAddRequest, WatchlistStatusRequest
from ..models.responses import StatusResponse, WatchlistEntryData, WatchlistResponse

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=WatchlistResponse,
    summary="Watchlist With Market Data",
    description="Watchlist rows with price, change, market cap and P/E",
)
async def get_watchlist(
    request: Request,
    email: str = Depends(get_current_user_email),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    entries = await watchlist_service.with_data(email)
    return WatchlistResponse(
        data=[WatchlistEntryData.model_validate(entry) for entry in entries],
        request_id=getattr(request.state, "request_id", None),
    )


@router.get("/symbols", response_model=StatusResponse, summary="Watchlist Symbols")
async def get_watchlist_symbols(
    request: Request,
    email: str = Depends(get_current_user_email),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    symbols = await watchlist_service.symbols(email)
    return StatusResponse.create(
        data={"symbols": symbols, "count": len(symbols)},
        request_id=getattr(request.state, "request_id", None),
    )


@router.post("", response_model=StatusResponse, summary="Add To Watchlist")
async def add_to_watchlist(
    add_request: WatchlistAddRequest,
    request: Request,
    email: str = Depends(get_current_user_email),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    added = await watchlist_service.add(email, add_request.symbol, add_request.company)
    return StatusResponse.create(
        data={"symbol": add_request.symbol, "added": added},
        request_id=getattr(request.state, "request_id", None),
    )


@router.delete("/{symbol}", response_model=StatusResponse, summary="Remove From Watchlist")
async def remove_from_watchlist(
    symbol: str,
    request: Request,
    email: str = Depends(get_current_user_email),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    if not await watchlist_service.remove(email, symbol):
        raise NotFoundError("WatchlistItem", symbol.upper())
    return StatusResponse.create(
        data={"symbol": symbol.upper(), "removed": True},
        request_id=getattr(request.state, "request_id", None),
    )


@router.post("/status", response_model=StatusResponse, summary="Watchlist Status")
async def watchlist_status(
    status_request: WatchlistStatusRequest,
    request: Request,
    email: str = Depends(get_current_user_email),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    """Whether each of the given symbols is on the user's watchlist."""
    result = await watchlist_service.status(email, status_request.symbols)
    return StatusResponse.create(
        data={"status": result}, request_id=getattr(request.state, "request_id", None)
    )
