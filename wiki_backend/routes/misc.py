"""
Miscellaneous routes: health check and tags.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from .. import __version__ as API_VERSION
from ..config import config, get_db
from ..database import Database

router = APIRouter(tags=["misc"])


# ─────────────────────────────────────────────────────────────
# Health Check
# ─────────────────────────────────────────────────────────────

@router.get("/status")
async def health_check() -> dict:
    """API health check."""
    return {
        "status": "ok",
        "version": API_VERSION,
        "admin_configured": config.has_admin(),
    }


# ─────────────────────────────────────────────────────────────
# Tags
# ─────────────────────────────────────────────────────────────

@router.get("/tags")
async def list_tags(
    db: Annotated[Database, Depends(get_db)],
    limit: int = Query(default=100, ge=1, le=500),
) -> list[dict]:
    """Tags with the number of articles carrying each, most used first."""
    return [{"name": t.name, "count": t.count} for t in db.tags.get_all(limit)]
