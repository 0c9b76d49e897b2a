"""Registration, OTP verification and login against the credential store."""

import logging
from functools import lru_cache

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    generate_otp,
    hash_password,
    make_public_id,
    otp_matches,
    verify_password,
)
from app.models import Role, Token, User
from app.schemas.auth import (
    AuthTokenResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    UserProjection,
    VerifyOtpRequest,
)
from app.services.mailer import MailDispatchError, OtpSender

logger = logging.getLogger(__name__)

MSG_OTP_SENT = "OTP sent. Verify your email."
MSG_VERIFIED = "Email verified successfully!"
MSG_LOGGED_IN = "Login successful!"


class AuthError(Exception):
    """Base for expected auth failures; carries the client message and HTTP status."""

    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UserAlreadyExistsError(AuthError):
    def __init__(self) -> None:
        super().__init__("User already exists")


class InvalidRoleError(AuthError):
    def __init__(self) -> None:
        super().__init__("Invalid role")


class UserNotFoundError(AuthError):
    status_code = 404

    def __init__(self) -> None:
        super().__init__("User not found")


class InvalidOtpError(AuthError):
    def __init__(self) -> None:
        super().__init__("Invalid or expired OTP")


class InvalidCredentialsError(AuthError):
    status_code = 401

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class EmailNotVerifiedError(AuthError):
    status_code = 403

    def __init__(self) -> None:
        super().__init__("Please verify your email first")


class OtpDispatchError(AuthError):
    status_code = 500

    def __init__(self) -> None:
        super().__init__("Failed to send OTP. Check email configuration.")


@lru_cache
def _dummy_password_hash() -> str:
    # Compared against when the email is unknown so both login failures cost one bcrypt check.
    return hash_password("not-a-real-password")


def warm_password_checks() -> None:
    """Compute the dummy hash up front so the first unknown-email login is not slower."""
    _dummy_password_hash()


def _email_domain(email: str) -> str:
    return email.rpartition("@")[2]


def _find_user(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def find_role(db: Session, role_name: str) -> Role | None:
    """Case-insensitive role lookup."""
    return (
        db.query(Role)
        .filter(func.upper(Role.role_name) == role_name.strip().upper())
        .first()
    )


def to_projection(user: User) -> UserProjection:
    """Sanitized view of a user for API responses."""
    return UserProjection(
        id=user.id,
        u_id=user.u_id,
        username=user.username,
        email=user.email,
        role_name=user.role.role_name if user.role is not None else None,
        verified=bool(user.verified),
    )


def _issue_token(db: Session, user: User) -> str:
    """Sign a one-day access token for the user and stage its record in the session."""
    role_name = user.role.role_name if user.role is not None else ""
    token, expires_at = create_access_token(sub=user.id, role=role_name)
    db.add(
        Token(
            user_id=user.id,
            token=token,
            token_type=ACCESS_TOKEN_TYPE,
            expires_at=expires_at,
        )
    )
    return token


def _stage_registration(db: Session, body: RegisterRequest) -> tuple[int, str, str]:
    """Validate, hash and flush the new user inside the open transaction. Returns (user_id, role_name, otp)."""
    if _find_user(db, body.email) is not None:
        raise UserAlreadyExistsError()

    role = find_role(db, body.role)
    if role is None:
        logger.info("Registration rejected: unknown role", extra={"role": body.role[:64]})
        raise InvalidRoleError()

    otp, otp_expires_at = generate_otp()
    user = User(
        username=body.username,
        email=body.email,
        password=hash_password(body.password),
        role_id=role.id,
        otp_code=otp,
        otp_expires_at=otp_expires_at,
        verified=False,
    )
    try:
        db.add(user)
        db.flush()
        user.u_id = make_public_id(user.id)
        db.flush()
    except IntegrityError as e:
        db.rollback()
        raise UserAlreadyExistsError() from e
    return user.id, role.role_name, otp


def _commit_registration(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise UserAlreadyExistsError() from e


async def register_user(
    db: Session,
    mailer: OtpSender,
    body: RegisterRequest,
) -> RegisterResponse:
    """
    Create an unverified user and email them an OTP.

    The insert, the derived u_id and the mail dispatch share one transaction:
    if the mail cannot be sent the transaction is rolled back and no user remains.
    Store access and bcrypt run in the threadpool so other requests keep being served.
    """
    user_id, role_name, otp = await run_in_threadpool(_stage_registration, db, body)

    try:
        await mailer.send_otp(body.email, otp)
    except MailDispatchError as e:
        await run_in_threadpool(db.rollback)
        logger.error(
            "Registration rolled back: OTP dispatch failed",
            extra={"email_domain": _email_domain(body.email), "reason": e.message},
        )
        raise OtpDispatchError() from e

    await run_in_threadpool(_commit_registration, db)

    logger.info(
        "User registered",
        extra={"user_id": user_id, "role": role_name},
    )
    return RegisterResponse(message=MSG_OTP_SENT, email=body.email)


def verify_otp(db: Session, body: VerifyOtpRequest) -> AuthTokenResponse:
    """
    Consume a pending OTP: mark the user verified, clear the code and issue a token.

    The update is conditional on the code still being on file, so of two concurrent
    requests with the same code only one succeeds.
    """
    user = _find_user(db, body.email)
    if user is None:
        raise UserNotFoundError()

    if not otp_matches(user.otp_code, user.otp_expires_at, body.otp):
        logger.info("OTP verification failed", extra={"user_id": user.id})
        raise InvalidOtpError()

    consumed = (
        db.query(User)
        .filter(User.id == user.id, User.otp_code == body.otp, User.verified.is_(False))
        .update(
            {User.verified: True, User.otp_code: None, User.otp_expires_at: None},
            synchronize_session=False,
        )
    )
    if consumed != 1:
        db.rollback()
        logger.info("OTP already consumed", extra={"user_id": user.id})
        raise InvalidOtpError()

    token = _issue_token(db, user)
    db.commit()

    logger.info("User verified", extra={"user_id": user.id})
    return AuthTokenResponse(message=MSG_VERIFIED, token=token, user=to_projection(user))


def login_user(db: Session, body: LoginRequest) -> AuthTokenResponse:
    """
    Authenticate with email and password; returns a fresh token.

    Unknown email and wrong password produce the same error. Unverified status is
    only reported once the password has been checked.
    """
    user = _find_user(db, body.email)
    if user is None:
        verify_password(body.password, _dummy_password_hash())
        raise InvalidCredentialsError()
    if not verify_password(body.password, user.password):
        logger.info("Login failed: bad password", extra={"user_id": user.id})
        raise InvalidCredentialsError()
    if not user.verified:
        raise EmailNotVerifiedError()

    token = _issue_token(db, user)
    db.commit()

    logger.info("User logged in", extra={"user_id": user.id})
    return AuthTokenResponse(message=MSG_LOGGED_IN, token=token, user=to_projection(user))
