"""Price alert endpoints for the signed-in user."""

from fastapi import APIRouter, Depends, Request, status

from ...config.logging import get_logger
from ...exceptions import NotFoundError
from ...services import AlertService
from ..dependencies import get_alert_service, get_current_user_email
from ..models.requests import AlertCreateRequest, AlertUpdateRequest
from ..models.responses import (
    AlertData,
    AlertListResponse,
    AlertResponse,
    StatusResponse,
)

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=AlertListResponse,
    summary="List Alerts",
    description="List the user's price alerts, newest first",
)
async def list_alerts(
    request: Request,
    email: str = Depends(get_current_user_email),
    alert_service: AlertService = Depends(get_alert_service),
):
    alerts = await alert_service.list_alerts(email)
    return AlertListResponse(
        data=[AlertData.model_validate(alert) for alert in alerts],
        request_id=getattr(request.state, "request_id", None),
    )


@router.post(
    "",
    response_model=AlertResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Alert",
    description="Create a price alert on a symbol",
)
async def create_alert(
    alert_request: AlertCreateRequest,
    request: Request,
    email: str = Depends(get_current_user_email),
    alert_service: AlertService = Depends(get_alert_service),
):
    """
    Create a price alert.

    - **symbol**: ticker, stored uppercase
    - **condition**: `greater` or `less`
    - **threshold**: price that must be crossed
    - **frequency**: `day`, `week` or `month`
    """
    request_id = getattr(request.state, "request_id", None)

    alert = await alert_service.create_alert(
        email=email,
        symbol=alert_request.symbol,
        company=alert_request.company,
        alert_name=alert_request.alert_name,
        condition=alert_request.condition.value,
        threshold=alert_request.threshold,
        frequency=alert_request.frequency.value,
    )

    logger.info("Alert created via API", alert_id=alert.id, request_id=request_id)
    return AlertResponse(data=AlertData.model_validate(alert), request_id=request_id)


@router.get("/{alert_id}", response_model=AlertResponse, summary="Get Alert")
async def get_alert(
    alert_id: int,
    request: Request,
    email: str = Depends(get_current_user_email),
    alert_service: AlertService = Depends(get_alert_service),
):
    alert = await alert_service.get_alert(email, alert_id)
    if alert is None:
        raise NotFoundError("Alert", str(alert_id))
    return AlertResponse(
        data=AlertData.model_validate(alert),
        request_id=getattr(request.state, "request_id", None),
    )


@router.patch("/{alert_id}", response_model=StatusResponse, summary="Update Alert")
async def update_alert(
    alert_id: int,
    update_request: AlertUpdateRequest,
    request: Request,
    email: str = Depends(get_current_user_email),
    alert_service: AlertService = Depends(get_alert_service),
):
    """Partially update an alert; only the fields sent are changed."""
    if await alert_service.get_alert(email, alert_id) is None:
        raise NotFoundError("Alert", str(alert_id))

    modified = await alert_service.update_alert(email, alert_id, update_request.changes())
    return StatusResponse.create(
        data={"alert_id": alert_id, "modified": modified},
        request_id=getattr(request.state, "request_id", None),
    )


@router.delete("/{alert_id}", response_model=StatusResponse, summary="Delete Alert")
async def delete_alert(
    alert_id: int,
    request: Request,
    email: str = Depends(get_current_user_email),
    alert_service: AlertService = Depends(get_alert_service),
):
    if not await alert_service.delete_alert(email, alert_id):
        raise NotFoundError("Alert", str(alert_id))
    return StatusResponse.create(
        data={"alert_id": alert_id, "deleted": True},
        request_id=getattr(request.state, "request_id", None),
    )
