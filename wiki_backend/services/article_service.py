"""
Article service: business logic for article operations.

Handles listing, authoring, reactions and moderation. Every write
that changes what a listing would show clears the response cache.
"""

import logging

from fastapi import HTTPException

from ..cache import ResponseCache, make_key
from ..config import config
from ..database import Database
from ..database.models import DBArticle, DBArticleSummary, DBUser
from ..exceptions import require_article
from ..notification_service import NotificationService
from ..scoring import calculate_article_score
from .recalculation_service import RecalculationService

logger = logging.getLogger(__name__)

REACTION_KINDS = ("like", "useful", "dislike")


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Strip blanks and duplicates, keeping first-seen order."""
    seen: list[str] = []
    for tag in tags or []:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class ArticleService:
    """Service for article-related business logic."""

    def __init__(
        self,
        db: Database,
        notifier: NotificationService | None = None,
        cache: ResponseCache | None = None,
    ):
        self.db = db
        self.notifier = notifier or NotificationService(db)
        self.cache = cache
        self.recalculator = RecalculationService(db, notifier=self.notifier, cache=cache)

    # ─────────────────────────────────────────────────────────────
    # Listing
    # ─────────────────────────────────────────────────────────────

    def list_articles(
        self,
        tags: list[str] | None = None,
        author_id: str | None = None,
        sort: str = "newest",
        limit: int = 50,
        offset: int = 0,
    ) -> list[DBArticleSummary]:
        """
        Get summaries matching the filters.

        Args:
            tags: Every tag must be present on the article
            author_id: Only this author's articles
            sort: newest, score, likes or useful
            limit: Maximum summaries to return
            offset: Pagination offset

        Returns:
            List of summaries, served from the response cache when fresh
        """
        tags = normalize_tags(tags)
        key = make_key(
            "articles", tags=tags, author_id=author_id, sort=sort, limit=limit, offset=offset
        )
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        summaries = self.db.get_summaries(
            tags=tags, author_id=author_id, sort=sort, limit=limit, offset=offset
        )
        if self.cache is not None:
            self.cache.set(key, summaries, ttl=config.LIST_CACHE_TTL)
        return summaries

    def get_article(self, article_id: str) -> tuple[DBArticle, int]:
        """Full record plus the score stored on its summary."""
        article = require_article(self.db.get_article(article_id))
        summary = self.db.get_summary(article_id)
        score = summary.article_score if summary else 0
        return article, score

    def get_disliked(self, limit: int = 10) -> list[DBArticleSummary]:
        return self.db.summaries.get_disliked(limit)

    # ─────────────────────────────────────────────────────────────
    # Authoring
    # ─────────────────────────────────────────────────────────────

    def create_article(
        self,
        author: DBUser,
        title: str,
        content: str,
        description: str = "",
        tags: list[str] | None = None,
        image_url: str | None = None,
    ) -> DBArticle:
        tags = normalize_tags(tags)
        score = calculate_article_score(content, 0, 0, 0)
        article_id = self.db.articles.add(
            title=title,
            content=content,
            author=author.display_name,
            author_id=author.id,
            article_score=score,
            description=description,
            tags=tags,
            image_url=image_url,
        )
        self.db.tags.adjust(added=tags)
        self.recalculator.sync_single_author(author.id)
        self._invalidate()

        logger.info(f"Article {article_id} created by {author.id} (score {score})")
        return self.db.get_article(article_id)

    def update_article(
        self,
        article_id: str,
        actor: DBUser,
        title: str | None = None,
        description: str | None = None,
        content: str | None = None,
        tags: list[str] | None = None,
        image_url: str | None = None,
        clear_image: bool = False,
    ) -> tuple[DBArticle, int]:
        article = require_article(self.db.get_article(article_id))
        self._require_owner(article, actor)
        summary = require_article(self.db.get_summary(article_id))

        new_tags = normalize_tags(tags) if tags is not None else None
        score = calculate_article_score(
            content if content is not None else article.content,
            summary.like_count,
            summary.useful_count,
            summary.dislike_count,
        )
        self.db.articles.update(
            article_id,
            article_score=score,
            title=title,
            description=description,
            content=content,
            tags=new_tags,
            image_url=image_url,
            clear_image=clear_image,
        )

        if new_tags is not None:
            self.db.tags.adjust(
                added=[t for t in new_tags if t not in article.tags],
                removed=[t for t in article.tags if t not in new_tags],
            )
        self.recalculator.sync_single_author(article.author_id)
        self._invalidate()

        return self.db.get_article(article_id), score

    def delete_article(self, article_id: str, actor: DBUser):
        article = require_article(self.db.get_article(article_id))
        self._require_owner(article, actor)

        self.db.articles.delete(article_id)
        self.db.tags.adjust(removed=article.tags)
        self.recalculator.sync_single_author(article.author_id)
        self._invalidate()
        logger.info(f"Article {article_id} deleted by {actor.id}")

    # ─────────────────────────────────────────────────────────────
    # Reactions
    # ─────────────────────────────────────────────────────────────

    def react(self, article_id: str, user: DBUser, kind: str) -> DBArticleSummary:
        """
        Register a like, useful or dislike from user.

        Raises:
            HTTPException: 404 if the article is missing, 409 if the user
                already reacted this way
        """
        if kind not in REACTION_KINDS:
            raise ValueError(f"Unknown reaction: {kind}")

        article = require_article(self.db.get_article(article_id))
        if not self.db.articles.add_reaction(article_id, user.id, kind):
            raise HTTPException(status_code=409, detail=f"Already reacted with {kind}")

        self.recalculator.rescore_article(article_id)
        self.recalculator.sync_single_author(article.author_id)
        self._invalidate()

        if kind == "like":
            self.notifier.send_like_notification(
                article.author_id, user.id, user.display_name, article.id, article.title
            )
        elif kind == "useful":
            self.notifier.send_useful_notification(
                article.author_id, user.id, user.display_name, article.id, article.title
            )

        return self.db.get_summary(article_id)

    def reset_dislikes(self, article_id: str) -> DBArticleSummary:
        article = require_article(self.db.get_article(article_id))
        summary = require_article(self.db.get_summary(article_id))
        score = calculate_article_score(
            article.content, summary.like_count, summary.useful_count, 0
        )
        self.db.articles.reset_dislikes(article_id, score)
        self.recalculator.sync_single_author(article.author_id)
        self._invalidate()
        logger.info(f"Dislikes reset on article {article_id}")
        return self.db.get_summary(article_id)

    def hide_article(self, article_id: str, reason: str, actor: DBUser) -> tuple[DBArticle, int]:
        """Hide an article from listings. It stays readable by ID."""
        require_article(self.db.get_article(article_id))
        self.db.articles.set_hidden(article_id, reason)
        self._invalidate()
        logger.info(f"Article {article_id} hidden by {actor.id}: {reason}")
        return self.get_article(article_id)

    # ─────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def _require_owner(article: DBArticle, actor: DBUser):
        if article.author_id != actor.id and not config.is_admin_user(actor.id, actor.email):
            raise HTTPException(status_code=403, detail="Not the author of this article")

    def _invalidate(self):
        if self.cache is not None:
            self.cache.clear()
