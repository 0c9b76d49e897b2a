"""
CLI entrypoint for the expired-token cleanup job. Run from cron, e.g.:

  python -m app.token_cleanup

Or daily: 0 3 * * * cd /path/to/auth-api && .venv/bin/python -m app.token_cleanup
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import build_engine, build_session_factory
from app.core.logging import configure_logging
from app.services.token_cleanup import purge_expired_tokens

logger = logging.getLogger(__name__)


def main() -> int:
    """Run cleanup: delete tokens whose expiry has passed."""
    settings = get_settings()
    configure_logging(settings)
    engine = build_engine(settings)
    db = build_session_factory(engine)()
    try:
        tokens_deleted = purge_expired_tokens(db, settings)
        logger.info("Token cleanup completed: tokens_deleted=%s", tokens_deleted)
        return 0
    except Exception as e:
        logger.exception("Token cleanup job failed: %s", e)
        return 1
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
