"""Core app configuration, database sessions and logging setup."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.logging import configure_logging

__all__ = ["configure_logging", "get_db", "get_settings", "settings"]
