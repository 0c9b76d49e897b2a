"""Outbound SMTP mail for OTP codes (aiosmtplib)."""

import asyncio
import logging
from email.message import EmailMessage
from typing import TYPE_CHECKING, Protocol

import aiosmtplib

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

OTP_SUBJECT = "Verify your account"


class MailDispatchError(Exception):
    """Raised when an email could not be handed to the SMTP server."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class OtpSender(Protocol):
    """Anything that can deliver an OTP code to an address."""

    async def send_otp(self, email: str, otp: str) -> None: ...


def build_otp_message(sender: str | None, recipient: str, otp: str) -> EmailMessage:
    """Plain-text verification email carrying the code."""
    message = EmailMessage()
    if sender:
        message["From"] = sender
    message["To"] = recipient
    message["Subject"] = OTP_SUBJECT
    message.set_content(f"Your verification code is: {otp}")
    return message


class SmtpMailer:
    """Sends OTP emails through the configured SMTP server; one connection per message."""

    def __init__(self, settings: "Settings") -> None:
        self.settings = settings

    async def send_otp(self, email: str, otp: str) -> None:
        s = self.settings
        message = build_otp_message(s.mail_from, email, otp)
        password = s.SMTP_PASSWORD.get_secret_value() if s.SMTP_PASSWORD else None
        try:
            await aiosmtplib.send(
                message,
                hostname=s.SMTP_HOST,
                port=s.SMTP_PORT,
                username=s.SMTP_USERNAME,
                password=password,
                use_tls=s.SMTP_USE_TLS,
                start_tls=s.SMTP_START_TLS,
                timeout=s.SMTP_TIMEOUT_SEC,
            )
        except (aiosmtplib.SMTPException, OSError, asyncio.TimeoutError, ValueError) as e:
            logger.warning(
                "OTP email dispatch failed",
                extra={
                    "smtp_host": s.SMTP_HOST,
                    "recipient_domain": email.rpartition("@")[2],
                    "reason": str(e)[:200],
                },
            )
            raise MailDispatchError("Failed to send OTP email.", cause=e) from e
        logger.info(
            "OTP email sent",
            extra={"recipient_domain": email.rpartition("@")[2]},
        )
