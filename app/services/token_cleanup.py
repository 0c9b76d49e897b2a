"""Housekeeping: delete token records whose expiry has passed."""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.models import Token

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def purge_expired_tokens(
    session: Session,
    settings: "Settings",
    now: datetime | None = None,
) -> int:
    """
    Delete tokens with expires_at in the past. Returns the number of rows deleted.

    Live tokens are never touched. Idempotent: safe to run repeatedly.
    """
    if not settings.TOKEN_CLEANUP_ENABLED:
        logger.info("Token cleanup is disabled (TOKEN_CLEANUP_ENABLED=false); skipping.")
        return 0

    cutoff = now or datetime.now(timezone.utc)
    deleted_count = (
        session.query(Token)
        .filter(Token.expires_at < cutoff)
        .delete(synchronize_session=False)
    )
    session.commit()

    if deleted_count > 0:
        logger.info(
            "Token cleanup run: cutoff=%s, tokens_deleted=%s",
            cutoff.isoformat(),
            deleted_count,
        )
    return deleted_count
