"""Manual triggers for the scheduled jobs."""

from fastapi import APIRouter, Depends, Request

from ...config.logging import get_logger
from ...core.context import AppContext
from ...core.price_alerts import run_price_alerts
from ...ormdb.models import AlertFrequency
from ..dependencies import get_context
from ..models.responses import StatusResponse

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/price-alerts/{cadence}",
    response_model=StatusResponse,
    summary="Run Price Alerts",
    description="Evaluate every alert at a cadence now and return the run summary",
)
async def trigger_price_alerts(
    cadence: AlertFrequency,
    request: Request,
    context: AppContext = Depends(get_context),
):
    request_id = getattr(request.state, "request_id", None)
    logger.info("Manual price alert run requested", cadence=cadence.value, request_id=request_id)

    summary = await run_price_alerts(cadence, context)
    return StatusResponse.create(data=summary.to_dict(), request_id=request_id)


@router.post("/news-summary", response_model=StatusResponse, summary="Send News Summary")
async def trigger_news_summary(request: Request, context: AppContext = Depends(get_context)):
    result = await context.engagement.send_daily_news_summary()
    return StatusResponse.create(
        data=result, request_id=getattr(request.state, "request_id", None)
    )


@router.post(
    "/inactive-reminders", response_model=StatusResponse, summary="Send Inactive Reminders"
)
async def trigger_inactive_reminders(
    request: Request, context: AppContext = Depends(get_context)
):
    result = await context.engagement.send_inactive_user_reminders(
        context.settings.inactive_user_days
    )
    return StatusResponse.create(
        data=result, request_id=getattr(request.state, "request_id", None)
    )
