"""Stock search and quote endpoints."""

from fastapi import APIRouter, Depends, Query, Request

from ...config.logging import get_logger
from ...core.context import AppContext
from ...exceptions import NotFoundError
from ..dependencies import get_context
from ..models.responses import StatusResponse

logger = get_logger(__name__)

router = APIRouter()


@router.get("/search", response_model=StatusResponse, summary="Search Symbols")
async def search_stocks(
    request: Request,
    q: str = Query(..., min_length=1, max_length=100, description="Search text"),
    context: AppContext = Depends(get_context),
):
    matches = await context.market_data.search_symbols(q)
    return StatusResponse.create(
        data={"query": q, "results": [m.model_dump() for m in matches], "count": len(matches)},
        request_id=getattr(request.state, "request_id", None),
    )


@router.get("/{symbol}/quote", response_model=StatusResponse, summary="Current Quote")
async def get_quote(
    symbol: str,
    request: Request,
    context: AppContext = Depends(get_context),
):
    """Latest price for a symbol; 404 when the provider has none."""
    quote = await context.market_data.get_quote(symbol)
    if quote is None:
        raise NotFoundError("Quote", symbol.upper())
    return StatusResponse.create(
        data=quote.model_dump(mode="json"),
        request_id=getattr(request.state, "request_id", None),
    )
