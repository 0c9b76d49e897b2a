"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.security import (
    OTP_LENGTH,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    ROLE_NAME_MAX_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


def _normalize_email(value: str) -> str:
    return value.strip().lower()


class RegisterRequest(BaseModel):
    """Body for POST /auth/register. All fields required."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        description="Display name",
    )
    email: EmailStr = Field(..., description="Email address; receives the OTP")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password",
    )
    role: str = Field(..., min_length=1, max_length=ROLE_NAME_MAX_LEN, description="Role name")

    @field_validator("username", "role")
    @classmethod
    def strip_not_blank(cls, v: str) -> str:
        s = v.strip()
        if not s:
            raise ValueError("must not be blank")
        return s

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class VerifyOtpRequest(BaseModel):
    """Body for POST /auth/verify-otp."""

    email: EmailStr
    otp: str = Field(
        ...,
        min_length=OTP_LENGTH,
        max_length=OTP_LENGTH,
        pattern=r"^\d+$",
        description="6-digit code from the verification email",
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class LoginRequest(BaseModel):
    """Credentials for login. Length rules are not enforced here so every bad login looks alike."""

    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class UserProjection(BaseModel):
    """User fields safe to return to clients (no password, no OTP)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    u_id: str | None
    username: str
    email: str
    role_name: str | None
    verified: bool


class RegisterResponse(BaseModel):
    """Response for a successful registration; the OTP itself is never echoed."""

    message: str
    email: str


class AuthTokenResponse(BaseModel):
    """Response for OTP verification and login."""

    message: str
    token: str = Field(..., description="JWT bearer token, valid for one day")
    user: UserProjection


class ErrorResponse(BaseModel):
    """Error body used by every failing auth endpoint."""

    message: str
