"""Password hashing, OTP generation and JWT creation/verification."""

import hmac
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Input validation bounds for registration and login bodies.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128
ROLE_NAME_MAX_LEN = 64

OTP_LENGTH = 6
OTP_TTL = timedelta(minutes=10)

ACCESS_TOKEN_TYPE = "ACCESS"
ACCESS_TOKEN_TTL = timedelta(days=1)

PUBLIC_ID_PREFIX = "USR"


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def generate_otp() -> tuple[str, datetime]:
    """Return a random 6-digit code and its expiry (now + 10 minutes, UTC)."""
    low = 10 ** (OTP_LENGTH - 1)
    code = str(low + secrets.randbelow(9 * low))
    return code, datetime.now(UTC) + OTP_TTL


def otp_matches(
    stored_code: str | None,
    stored_expires_at: datetime | None,
    submitted_code: str,
    now: datetime | None = None,
) -> bool:
    """
    True only when a code is on file, equals the submitted one and has not expired.

    Naive timestamps (e.g. from SQLite) are treated as UTC.
    """
    if not stored_code or stored_expires_at is None:
        return False
    if not hmac.compare_digest(stored_code.encode("utf-8"), submitted_code.encode("utf-8")):
        return False
    expires_at = stored_expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    return (now or datetime.now(UTC)) <= expires_at


def make_public_id(numeric_id: int, prefix: str = PUBLIC_ID_PREFIX) -> str:
    """Public-facing user identifier, e.g. USR-000042."""
    return f"{prefix}-{numeric_id:06d}"


def create_access_token(sub: str | int, role: str) -> tuple[str, datetime]:
    """Create a JWT access token with sub (user id), role, iat and exp. Returns (token, exp)."""
    now = datetime.now(UTC)
    expire = now + ACCESS_TOKEN_TTL
    payload: dict[str, Any] = {
        "sub": str(sub),
        "role": role,
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    token = jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )
    return token, expire


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, role, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
    )
