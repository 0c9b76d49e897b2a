"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthTokenResponse,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    UserProjection,
    VerifyOtpRequest,
)
from app.schemas.health import HealthResponse

__all__ = [
    "AuthTokenResponse",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "RegisterRequest",
    "RegisterResponse",
    "UserProjection",
    "VerifyOtpRequest",
]
