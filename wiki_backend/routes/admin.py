"""
Admin routes: recalculation jobs, index rebuild and cache control.
"""

import logging
import time
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException

from ..auth import AdminUser, require_admin
from ..services import RecalculationServiceDep

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)]
)


def _run_job(name: str, job: Callable[[], dict]) -> dict:
    """Run a job, timing it and mapping unexpected failures to a 500."""
    started = time.perf_counter()
    try:
        result = job()
    except HTTPException:
        raise
    except Exception:
        logger.exception(f"Admin job {name} failed")
        raise HTTPException(status_code=500, detail=f"Failed to run {name}")

    elapsed = time.perf_counter() - started
    return {
        "success": True,
        **result,
        "processing_time": f"{elapsed:.2f}s",
    }


# ─────────────────────────────────────────────────────────────
# Recalculation
# ─────────────────────────────────────────────────────────────

@router.post("/recalculate-scores")
async def recalculate_scores(service: RecalculationServiceDep) -> dict:
    """Rescore every article, then refresh author aggregates."""
    def job() -> dict:
        result = service.recalculate_scores()
        authors = service.sync_author_stats()
        result["authors_processed"] = authors["processed"]
        return result

    return _run_job("recalculate-scores", job)


@router.post("/sync-author-stats")
async def sync_author_stats(service: RecalculationServiceDep) -> dict:
    return _run_job("sync-author-stats", service.sync_author_stats)


@router.post("/recalculate-trophies")
async def recalculate_trophies(service: RecalculationServiceDep) -> dict:
    return _run_job("recalculate-trophies", service.recalculate_trophies)


@router.post("/recalculate-all")
async def recalculate_all(service: RecalculationServiceDep, admin: AdminUser) -> dict:
    """Scores, then author aggregates, then trophies."""
    return _run_job("recalculate-all", lambda: service.recalculate_all(actor_id=admin.id))


# ─────────────────────────────────────────────────────────────
# Index & Cache
# ─────────────────────────────────────────────────────────────

@router.post("/rebuild-index")
async def rebuild_index(service: RecalculationServiceDep, admin: AdminUser) -> dict:
    return _run_job("rebuild-index", lambda: service.rebuild_index(actor_id=admin.id))


@router.post("/clear-cache")
async def clear_cache(service: RecalculationServiceDep, admin: AdminUser) -> dict:
    def job() -> dict:
        dropped = service.clear_cache(actor_id=admin.id)
        return {"message": "Cache cleared", "entries_dropped": dropped}

    return _run_job("clear-cache", job)


@router.get("/get-last-updated")
async def get_last_updated(service: RecalculationServiceDep) -> dict:
    return _run_job("get-last-updated", lambda: {"last_updated": service.get_last_updated()})
