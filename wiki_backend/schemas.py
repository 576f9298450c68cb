"""
Pydantic models for API request/response validation.
"""

from typing import Literal

from pydantic import BaseModel, Field

from .database import (
    DBArticle,
    DBArticleSummary,
    DBAuthorStats,
    DBComment,
    DBNotification,
    DBUser,
)


# ─────────────────────────────────────────────────────────────
# Article Schemas
# ─────────────────────────────────────────────────────────────

class ArticleSummaryResponse(BaseModel):
    """Article for list view."""
    id: str
    title: str
    description: str
    tags: list[str]
    author: str
    author_id: str
    image_url: str | None = None
    like_count: int
    useful_count: int
    dislike_count: int
    article_score: int
    created_at: str
    updated_at: str | None = None
    is_hidden: bool = False

    @classmethod
    def from_db(cls, summary: DBArticleSummary) -> "ArticleSummaryResponse":
        return cls(
            id=summary.id,
            title=summary.title,
            description=summary.description,
            tags=summary.tags,
            author=summary.author,
            author_id=summary.author_id,
            image_url=summary.image_url,
            like_count=summary.like_count,
            useful_count=summary.useful_count,
            dislike_count=summary.dislike_count,
            article_score=summary.article_score,
            created_at=summary.created_at.isoformat(),
            updated_at=summary.updated_at.isoformat() if summary.updated_at else None,
            is_hidden=summary.is_hidden,
        )


class ArticleDetailResponse(BaseModel):
    """Full article with its current score."""
    id: str
    title: str
    description: str
    content: str
    tags: list[str]
    author: str
    author_id: str
    image_url: str | None = None
    like_count: int
    useful_count: int
    dislike_count: int
    article_score: int
    created_at: str
    updated_at: str | None = None
    is_hidden: bool = False
    hidden_reason: str | None = None
    hidden_at: str | None = None

    @classmethod
    def from_db(cls, article: DBArticle, article_score: int) -> "ArticleDetailResponse":
        return cls(
            id=article.id,
            title=article.title,
            description=article.description,
            content=article.content,
            tags=article.tags,
            author=article.author,
            author_id=article.author_id,
            image_url=article.image_url,
            like_count=article.like_count,
            useful_count=article.useful_count,
            dislike_count=article.dislike_count,
            article_score=article_score,
            created_at=article.created_at.isoformat(),
            updated_at=article.updated_at.isoformat() if article.updated_at else None,
            is_hidden=article.is_hidden,
            hidden_reason=article.hidden_reason,
            hidden_at=article.hidden_at.isoformat() if article.hidden_at else None,
        )


class CreateArticleRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str
    description: str = ""
    tags: list[str] = []
    image_url: str | None = None


class HideArticleRequest(BaseModel):
    reason: str = Field(min_length=1, max_length=500)


class UpdateArticleRequest(BaseModel):
    """Fields left unset are not changed."""
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    content: str | None = None
    tags: list[str] | None = None
    image_url: str | None = None
    clear_image: bool = False


ArticleSort = Literal["newest", "score", "likes", "useful"]


# ─────────────────────────────────────────────────────────────
# Comment Schemas
# ─────────────────────────────────────────────────────────────

class CommentResponse(BaseModel):
    id: str
    article_id: str
    parent_id: str | None = None
    author_id: str
    author_name: str
    content: str
    like_count: int
    reply_count: int
    created_at: str

    @classmethod
    def from_db(cls, comment: DBComment) -> "CommentResponse":
        return cls(
            id=comment.id,
            article_id=comment.article_id,
            parent_id=comment.parent_id,
            author_id=comment.author_id,
            author_name=comment.author_name,
            content=comment.content,
            like_count=comment.like_count,
            reply_count=comment.reply_count,
            created_at=comment.created_at.isoformat(),
        )


class CreateCommentRequest(BaseModel):
    content: str = Field(min_length=1, max_length=5000)
    parent_id: str | None = None


# ─────────────────────────────────────────────────────────────
# User Schemas
# ─────────────────────────────────────────────────────────────

class AuthorStatsResponse(BaseModel):
    author_id: str
    article_count: int
    like_count: int
    useful_count: int
    total_score: int
    average_score: float

    @classmethod
    def from_db(cls, stats: DBAuthorStats) -> "AuthorStatsResponse":
        return cls(
            author_id=stats.author_id,
            article_count=stats.article_count,
            like_count=stats.like_count,
            useful_count=stats.useful_count,
            total_score=stats.article_score_sum,
            average_score=round(stats.average_score, 1),
        )


class UserResponse(BaseModel):
    id: str
    email: str | None
    display_name: str
    bio: str
    photo_url: str | None = None
    selected_badge: str | None = None
    earned_trophies: list[str]
    available_badges: list[str]
    is_admin: bool
    stats: AuthorStatsResponse | None = None
    created_at: str
    last_login_at: str | None = None

    @classmethod
    def from_db(
        cls,
        user: DBUser,
        is_admin: bool,
        stats: DBAuthorStats | None = None,
    ) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            bio=user.bio,
            photo_url=user.photo_url,
            selected_badge=user.selected_badge,
            earned_trophies=user.earned_trophies,
            available_badges=user.available_badges,
            is_admin=is_admin,
            stats=AuthorStatsResponse.from_db(stats) if stats else None,
            created_at=user.created_at.isoformat(),
            last_login_at=user.last_login_at.isoformat() if user.last_login_at else None,
        )


class LoginRequest(BaseModel):
    """Profile data forwarded from the identity provider on sign-in."""
    id: str = Field(min_length=1)
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = None


class UpdateUserRequest(BaseModel):
    display_name: str | None = Field(default=None, min_length=1, max_length=100)
    bio: str | None = Field(default=None, max_length=1000)
    photo_url: str | None = None


class SelectBadgeRequest(BaseModel):
    badge_id: str | None = None


class TrophyStats(BaseModel):
    article_count: int
    like_count: int
    useful_count: int
    average_score: float
    total_score: int


class UserTrophiesResponse(BaseModel):
    user_id: str
    trophy_count: int
    badge_count: int
    trophies: list[str]
    badges: list[str]
    new_trophies: list[str]
    new_badges: list[str]
    stats: TrophyStats


# ─────────────────────────────────────────────────────────────
# Notification Schemas
# ─────────────────────────────────────────────────────────────

class NotificationResponse(BaseModel):
    id: str
    type: str
    content: str
    is_read: bool
    created_at: str
    sender_id: str | None = None
    sender_name: str | None = None
    article_id: str | None = None
    article_title: str | None = None
    trophy_id: str | None = None
    badge_id: str | None = None

    @classmethod
    def from_db(cls, notification: DBNotification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            type=notification.type,
            content=notification.content,
            is_read=notification.is_read,
            created_at=notification.created_at.isoformat(),
            sender_id=notification.sender_id,
            sender_name=notification.sender_name,
            article_id=notification.article_id,
            article_title=notification.article_title,
            trophy_id=notification.trophy_id,
            badge_id=notification.badge_id,
        )


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    unread_count: int
