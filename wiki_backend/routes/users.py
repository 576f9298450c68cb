"""
User routes: login upsert, profiles, badges, trophies and author ranking.
"""

from fastapi import APIRouter, Query

from ..auth import CurrentUser, is_admin
from ..schemas import (
    ArticleSummaryResponse,
    AuthorStatsResponse,
    LoginRequest,
    SelectBadgeRequest,
    UpdateUserRequest,
    UserResponse,
    UserTrophiesResponse,
)
from ..services import UserServiceDep

router = APIRouter(tags=["users"])


# ─────────────────────────────────────────────────────────────
# Profiles
# ─────────────────────────────────────────────────────────────

@router.post("/users")
async def login(request: LoginRequest, service: UserServiceDep) -> UserResponse:
    """Create or refresh a profile after sign-in with the identity provider."""
    user, _ = service.login(
        request.id,
        email=request.email,
        display_name=request.display_name,
        photo_url=request.photo_url,
    )
    user, stats = service.get_profile(user.id)
    return UserResponse.from_db(user, is_admin=is_admin(user), stats=stats)


@router.get("/users/{user_id}")
async def get_user(user_id: str, service: UserServiceDep) -> UserResponse:
    user, stats = service.get_profile(user_id)
    return UserResponse.from_db(user, is_admin=is_admin(user), stats=stats)


@router.put("/users/{user_id}")
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    service: UserServiceDep,
    actor: CurrentUser,
) -> UserResponse:
    service.update_profile(
        user_id,
        actor,
        display_name=request.display_name,
        bio=request.bio,
        photo_url=request.photo_url,
    )
    user, stats = service.get_profile(user_id)
    return UserResponse.from_db(user, is_admin=is_admin(user), stats=stats)


@router.put("/users/{user_id}/badge")
async def select_badge(
    user_id: str,
    request: SelectBadgeRequest,
    service: UserServiceDep,
    actor: CurrentUser,
) -> UserResponse:
    service.select_badge(user_id, actor, request.badge_id)
    user, stats = service.get_profile(user_id)
    return UserResponse.from_db(user, is_admin=is_admin(user), stats=stats)


# ─────────────────────────────────────────────────────────────
# Articles, Trophies & Ranking
# ─────────────────────────────────────────────────────────────

@router.get("/users/{user_id}/articles")
async def get_user_articles(
    user_id: str,
    service: UserServiceDep,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> list[ArticleSummaryResponse]:
    summaries = service.get_articles(user_id, limit=limit, offset=offset)
    return [ArticleSummaryResponse.from_db(s) for s in summaries]


@router.get("/users/{user_id}/trophies")
async def get_user_trophies(user_id: str, service: UserServiceDep) -> UserTrophiesResponse:
    """Evaluate trophies and badges for a user, notifying about new ones."""
    return UserTrophiesResponse(**service.get_trophies(user_id))


@router.get("/authors/ranking")
async def author_ranking(
    service: UserServiceDep,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> list[AuthorStatsResponse]:
    """Authors ordered by total article score."""
    return [AuthorStatsResponse.from_db(s) for s in service.get_ranking(limit, offset)]
