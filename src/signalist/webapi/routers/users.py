"""User sign-up and visit endpoints."""

from fastapi import APIRouter, Depends, Request, status

from ...config.logging import get_logger
from ...exceptions import NotFoundError
from ...services import UserService
from ..dependencies import get_current_user_email, get_user_service
from ..models.requests import UserRegistrationRequest
from ..models.responses import StatusResponse

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=StatusResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register User",
    description="Called by the auth layer after sign-up; sends the welcome email",
)
async def register_user(
    registration: UserRegistrationRequest,
    request: Request,
    user_service: UserService = Depends(get_user_service),
):
    result = await user_service.register_user(**registration.model_dump())
    return StatusResponse.create(
        data={
            "user_id": result.user.preferred_id,
            "email": result.user.email,
            "welcome_sent": result.welcome_sent,
        },
        request_id=getattr(request.state, "request_id", None),
    )


@router.post("/me/visit", response_model=StatusResponse, summary="Record Visit")
async def record_visit(
    request: Request,
    email: str = Depends(get_current_user_email),
    user_service: UserService = Depends(get_user_service),
):
    if not await user_service.record_visit(email):
        raise NotFoundError("User", email)
    return StatusResponse.create(
        data={"recorded": True}, request_id=getattr(request.state, "request_id", None)
    )
