"""
Database module - SQLite operations for articles, summaries, users and notifications.

Uses repository pattern for better separation of concerns.
"""

from .connection import DatabaseConnection
from .models import (
    DBArticle,
    DBArticleSummary,
    DBAuthorStats,
    DBComment,
    DBNotification,
    DBSystemMarker,
    DBTag,
    DBUser,
)
from .article_repository import ArticleRepository
from .summary_repository import SummaryRepository
from .author_stats_repository import AuthorStatsRepository
from .user_repository import UserRepository
from .comment_repository import CommentRepository
from .tag_repository import TagRepository
from .notification_repository import NotificationRepository
from .system_repository import SystemRepository
from .database import Database

__all__ = [
    "Database",
    "DatabaseConnection",
    "DBArticle",
    "DBArticleSummary",
    "DBAuthorStats",
    "DBComment",
    "DBNotification",
    "DBSystemMarker",
    "DBTag",
    "DBUser",
    "ArticleRepository",
    "SummaryRepository",
    "AuthorStatsRepository",
    "UserRepository",
    "CommentRepository",
    "TagRepository",
    "NotificationRepository",
    "SystemRepository",
]
