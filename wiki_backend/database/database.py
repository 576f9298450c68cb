"""
Database facade - provides unified access to all repositories.
"""

from pathlib import Path

from .connection import DatabaseConnection
from .article_repository import ArticleRepository
from .summary_repository import SummaryRepository
from .author_stats_repository import AuthorStatsRepository
from .user_repository import UserRepository
from .comment_repository import CommentRepository
from .tag_repository import TagRepository
from .notification_repository import NotificationRepository
from .system_repository import SystemRepository
from .models import DBArticle, DBArticleSummary, DBAuthorStats, DBUser


class Database:
    """
    Unified database access facade.

    Repositories are exposed as attributes; the most common lookups are
    also available as methods.
    """

    def __init__(self, db_path: Path):
        self._connection = DatabaseConnection(db_path)

        # Initialize repositories
        self.articles = ArticleRepository(self._connection)
        self.summaries = SummaryRepository(self._connection)
        self.author_stats = AuthorStatsRepository(self._connection)
        self.users = UserRepository(self._connection)
        self.comments = CommentRepository(self._connection)
        self.tags = TagRepository(self._connection)
        self.notifications = NotificationRepository(self._connection)
        self.system = SystemRepository(self._connection)

    # ─────────────────────────────────────────────────────────────
    # Article operations
    # ─────────────────────────────────────────────────────────────

    def get_article(self, article_id: str) -> DBArticle | None:
        return self.articles.get(article_id)

    def get_summary(self, article_id: str) -> DBArticleSummary | None:
        return self.summaries.get(article_id)

    def get_summaries(
        self,
        tags: list[str] | None = None,
        author_id: str | None = None,
        sort: str = "newest",
        limit: int = 50,
        offset: int = 0,
    ) -> list[DBArticleSummary]:
        return self.summaries.get_many(tags, author_id, sort, limit, offset)

    # ─────────────────────────────────────────────────────────────
    # User operations
    # ─────────────────────────────────────────────────────────────

    def get_user(self, user_id: str) -> DBUser | None:
        return self.users.get(user_id)

    def get_author_stats(self, author_id: str) -> DBAuthorStats | None:
        return self.author_stats.get(author_id)

    # ─────────────────────────────────────────────────────────────
    # Notification operations
    # ─────────────────────────────────────────────────────────────

    def get_unread_count(self, user_id: str) -> int:
        return self.notifications.get_unread_count(user_id)
