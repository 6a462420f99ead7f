"""
Realtime Database Factory

Provides a single entry point for obtaining the realtime tree handle.
The factory keeps the rest of the application agnostic about which
backend is active.

Usage:
    from app.services.realtime import get_realtime_db

    # Returns MockRealtimeDatabase or SqlRealtimeDatabase based on ENV_MODE
    db = get_realtime_db()
    key = await db.push("inquiries", record)

Environment Switching:
    - ENV_MODE=development → MockRealtimeDatabase (in-memory)
    - ENV_MODE=staging     → SqlRealtimeDatabase (Postgres + Redis)
    - ENV_MODE=production  → SqlRealtimeDatabase (Postgres + Redis)

Author: Spice Heritage Engineering
Version: 1.0.0
"""

import logging
from functools import lru_cache

from app.core.config import get_settings
from app.services.realtime.base import (
    BaseRealtimeDatabase,
    RealtimeDatabaseError,
    Snapshot,
    TreePath,
    generate_push_id,
    parse_path,
)
from app.services.realtime.mock import MockRealtimeDatabase
from app.services.realtime.sql import SqlRealtimeDatabase

logger = logging.getLogger(__name__)


@lru_cache()
def get_realtime_db() -> BaseRealtimeDatabase:
    """
    Get the configured realtime tree instance.

    The instance is cached so every request and every listener in the
    process shares one handle (and, in development, one in-memory tree).
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Realtime DB: Using MockRealtimeDatabase (development mode)")
        return MockRealtimeDatabase()
    else:
        logger.info(
            f"Realtime DB: Using SqlRealtimeDatabase "
            f"({settings.env_mode.value} mode)"
        )
        return SqlRealtimeDatabase()


def reset_realtime_db() -> None:
    """
    Clear the cached realtime tree instance.

    The next call to get_realtime_db() will create a new instance.
    """
    get_realtime_db.cache_clear()
    logger.debug("Realtime DB cache cleared")


__all__ = [
    "get_realtime_db",
    "reset_realtime_db",
    "BaseRealtimeDatabase",
    "RealtimeDatabaseError",
    "Snapshot",
    "TreePath",
    "generate_push_id",
    "parse_path",
    "MockRealtimeDatabase",
    "SqlRealtimeDatabase",
]
