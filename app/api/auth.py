"""Registration, OTP verification and login endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.auth import (
    AuthTokenResponse,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    VerifyOtpRequest,
)
from app.services.auth import AuthError, login_user, register_user, verify_otp
from app.services.mailer import OtpSender

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_mailer(request: Request) -> OtpSender:
    """Dependency: the OTP sender created at application startup."""
    return request.app.state.mailer


def _to_http(e: AuthError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
async def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    mailer: Annotated[OtpSender, Depends(get_mailer)],
) -> RegisterResponse:
    """
    Register an unverified account and email a 6-digit OTP (valid 10 minutes).
    The account cannot log in until POST /auth/verify-otp succeeds.
    """
    try:
        return await register_user(db, mailer, body)
    except AuthError as e:
        raise _to_http(e) from e


@router.post(
    "/verify-otp",
    response_model=AuthTokenResponse,
    responses={**_ERROR_RESPONSES, 404: {"model": ErrorResponse}},
)
def post_verify_otp(
    body: VerifyOtpRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthTokenResponse:
    """Verify the emailed OTP; on success the account is verified and a bearer token returned."""
    try:
        return verify_otp(db, body)
    except AuthError as e:
        raise _to_http(e) from e


@router.post(
    "/login",
    response_model=AuthTokenResponse,
    responses={
        **_ERROR_RESPONSES,
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthTokenResponse:
    """
    Authenticate with email and password; returns a JWT valid for one day.
    Include the token in the Authorization header as: Bearer <token>
    """
    try:
        return login_user(db, body)
    except AuthError as e:
        raise _to_http(e) from e
