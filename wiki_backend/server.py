"""
Wiki API Server

FastAPI application providing endpoints for:
- Articles (list, author, react, moderate)
- Comments and replies
- Users, trophies, badges and author ranking
- Notifications
- Admin recalculation jobs
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import config, state
from .database import Database
from .cache import create_cache
from .rate_limit import setup_rate_limiting
from .routes import (
    admin_router,
    articles_router,
    comments_router,
    misc_router,
    notifications_router,
    users_router,
)
from .routes.misc import API_VERSION

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize application resources."""
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Startup - skip if already initialized (e.g., by tests)
    if state.db is None:
        state.db = Database(config.DB_PATH)
        logger.info(f"Database opened at {config.DB_PATH}")
    if state.cache is None:
        state.cache = create_cache(
            max_size=config.LIST_CACHE_SIZE,
            default_ttl=config.LIST_CACHE_TTL,
        )

    if not config.has_admin():
        logger.warning("ADMIN_EMAIL or ADMIN_USER_ID is not set. Admin endpoints will reject every caller.")

    yield


app = FastAPI(
    title="Wiki API",
    version=API_VERSION,
    lifespan=lifespan
)

setup_rate_limiting(app)

# Include routers
app.include_router(misc_router)
app.include_router(articles_router)
app.include_router(comments_router)
app.include_router(users_router)
app.include_router(notifications_router)
app.include_router(admin_router)
