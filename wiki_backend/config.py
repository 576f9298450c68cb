"""
Configuration and application state management.
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from fastapi import HTTPException

if TYPE_CHECKING:
    from .database import Database
    from .cache import ResponseCache

# Load environment variables
load_dotenv()


def _parse_int(value: str | None, default: int) -> int:
    """Parse integer from environment variable."""
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


class Config:
    """Application configuration from environment."""
    DB_PATH: Path = Path(os.getenv("DB_PATH", "./data/wiki.db"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Users whose email matches this address get admin rights
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "")
    # Only this identity-provider ID may register with ADMIN_EMAIL
    ADMIN_USER_ID: str = os.getenv("ADMIN_USER_ID", "")

    # Requests per minute per client IP, 0 disables limiting
    RATE_LIMIT_PER_MINUTE: int = _parse_int(os.getenv("RATE_LIMIT_PER_MINUTE"), 120)

    # Oldest notifications are pruned past this many per user
    NOTIFICATION_LIMIT: int = _parse_int(os.getenv("NOTIFICATION_LIMIT"), 50)

    # Recalculation jobs commit staged writes in batches of this size
    RECALC_BATCH_SIZE: int = _parse_int(os.getenv("RECALC_BATCH_SIZE"), 500)

    # Listing / ranking response cache
    LIST_CACHE_TTL: int = _parse_int(os.getenv("LIST_CACHE_TTL"), 60)  # seconds
    LIST_CACHE_SIZE: int = _parse_int(os.getenv("LIST_CACHE_SIZE"), 256)

    @classmethod
    def has_admin(cls) -> bool:
        """Check if an admin account is configured."""
        return bool(cls.ADMIN_EMAIL) and bool(cls.ADMIN_USER_ID)

    @classmethod
    def is_admin_email(cls, email: str | None) -> bool:
        """Check an email against the configured admin address."""
        return bool(cls.ADMIN_EMAIL) and email == cls.ADMIN_EMAIL

    @classmethod
    def is_admin_user(cls, user_id: str | None, email: str | None) -> bool:
        """Admin rights need both the configured ID and the configured email."""
        return cls.has_admin() and user_id == cls.ADMIN_USER_ID and cls.is_admin_email(email)


config = Config()


class AppState:
    """Shared application state."""
    db: "Database | None" = None
    cache: "ResponseCache | None" = None


state = AppState()


def get_db() -> "Database":
    """Dependency to get database instance."""
    if not state.db:
        raise HTTPException(status_code=500, detail="Database not initialized")
    return state.db
