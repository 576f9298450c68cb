"""
Article routes: listing, authoring, reactions and moderation.
"""

from typing import Annotated

from fastapi import APIRouter, Query

from ..auth import AdminUser, CurrentUser
from ..schemas import (
    ArticleDetailResponse,
    ArticleSort,
    ArticleSummaryResponse,
    CreateArticleRequest,
    HideArticleRequest,
    UpdateArticleRequest,
)
from ..services import ArticleServiceDep

router = APIRouter(
    prefix="/articles",
    tags=["articles"],
)


# ─────────────────────────────────────────────────────────────
# List & Moderation (static paths first)
# ─────────────────────────────────────────────────────────────

@router.get("")
async def list_articles(
    service: ArticleServiceDep,
    tag: Annotated[list[str] | None, Query()] = None,
    author_id: str | None = None,
    sort: ArticleSort = "newest",
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> list[ArticleSummaryResponse]:
    """List article summaries. Repeated `tag` parameters must all match."""
    summaries = service.list_articles(
        tags=tag, author_id=author_id, sort=sort, limit=limit, offset=offset
    )
    return [ArticleSummaryResponse.from_db(s) for s in summaries]


@router.get("/disliked")
async def list_disliked(
    service: ArticleServiceDep,
    _admin: AdminUser,
    limit: int = Query(default=10, ge=1, le=100),
) -> list[ArticleSummaryResponse]:
    """Articles with dislikes, most disliked first."""
    return [ArticleSummaryResponse.from_db(s) for s in service.get_disliked(limit)]


@router.post("")
async def create_article(
    request: CreateArticleRequest,
    service: ArticleServiceDep,
    user: CurrentUser,
) -> ArticleDetailResponse:
    article = service.create_article(
        author=user,
        title=request.title,
        content=request.content,
        description=request.description,
        tags=request.tags,
        image_url=request.image_url,
    )
    return ArticleDetailResponse.from_db(*service.get_article(article.id))


# ─────────────────────────────────────────────────────────────
# Single Article
# ─────────────────────────────────────────────────────────────

@router.get("/{article_id}")
async def get_article(article_id: str, service: ArticleServiceDep) -> ArticleDetailResponse:
    article, score = service.get_article(article_id)
    return ArticleDetailResponse.from_db(article, score)


@router.put("/{article_id}")
async def update_article(
    article_id: str,
    request: UpdateArticleRequest,
    service: ArticleServiceDep,
    user: CurrentUser,
) -> ArticleDetailResponse:
    article, score = service.update_article(
        article_id,
        actor=user,
        title=request.title,
        description=request.description,
        content=request.content,
        tags=request.tags,
        image_url=request.image_url,
        clear_image=request.clear_image,
    )
    return ArticleDetailResponse.from_db(article, score)


@router.delete("/{article_id}")
async def delete_article(
    article_id: str,
    service: ArticleServiceDep,
    user: CurrentUser,
) -> dict:
    service.delete_article(article_id, actor=user)
    return {"success": True}


# ─────────────────────────────────────────────────────────────
# Reactions
# ─────────────────────────────────────────────────────────────

@router.post("/{article_id}/like")
async def like_article(
    article_id: str,
    service: ArticleServiceDep,
    user: CurrentUser,
) -> ArticleSummaryResponse:
    return ArticleSummaryResponse.from_db(service.react(article_id, user, "like"))


@router.post("/{article_id}/useful")
async def mark_useful(
    article_id: str,
    service: ArticleServiceDep,
    user: CurrentUser,
) -> ArticleSummaryResponse:
    return ArticleSummaryResponse.from_db(service.react(article_id, user, "useful"))


@router.post("/{article_id}/dislike")
async def dislike_article(
    article_id: str,
    service: ArticleServiceDep,
    user: CurrentUser,
) -> ArticleSummaryResponse:
    return ArticleSummaryResponse.from_db(service.react(article_id, user, "dislike"))


@router.post("/{article_id}/reset-dislikes")
async def reset_dislikes(
    article_id: str,
    service: ArticleServiceDep,
    _admin: AdminUser,
) -> ArticleSummaryResponse:
    return ArticleSummaryResponse.from_db(service.reset_dislikes(article_id))


@router.post("/{article_id}/hide")
async def hide_article(
    article_id: str,
    request: HideArticleRequest,
    service: ArticleServiceDep,
    admin: AdminUser,
) -> ArticleDetailResponse:
    """Take an article out of every listing, keeping the reason on its record."""
    article, score = service.hide_article(article_id, request.reason, actor=admin)
    return ArticleDetailResponse.from_db(article, score)
