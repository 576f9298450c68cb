"""
Comment service: threaded comments on articles.

Threads are one level deep; a reply's parent must be a top-level comment
on the same article.
"""

import logging

from fastapi import HTTPException

from ..config import config
from ..database import Database
from ..database.models import DBComment, DBUser
from ..exceptions import require_article, require_comment
from ..notification_service import NotificationService

logger = logging.getLogger(__name__)


class CommentService:
    """Service for comment-related business logic."""

    def __init__(self, db: Database, notifier: NotificationService | None = None):
        self.db = db
        self.notifier = notifier or NotificationService(db)

    def list_comments(self, article_id: str, limit: int = 20, offset: int = 0) -> list[DBComment]:
        require_article(self.db.get_summary(article_id))
        return self.db.comments.get_for_article(article_id, limit=limit, offset=offset)

    def list_replies(self, comment_id: str, limit: int = 5, offset: int = 0) -> list[DBComment]:
        require_comment(self.db.comments.get(comment_id))
        return self.db.comments.get_replies(comment_id, limit=limit, offset=offset)

    def add_comment(
        self,
        article_id: str,
        author: DBUser,
        content: str,
        parent_id: str | None = None,
    ) -> DBComment:
        """
        Post a comment, or a reply when parent_id is given.

        Notifies the article author for comments and the parent comment's
        author for replies.

        Raises:
            HTTPException: 404 for a missing article or parent, 400 when the
                parent is itself a reply or belongs to another article
        """
        article = require_article(self.db.get_article(article_id))

        parent = None
        if parent_id is not None:
            parent = require_comment(self.db.comments.get(parent_id))
            if parent.article_id != article_id:
                raise HTTPException(status_code=400, detail="Parent comment is on another article")
            if parent.parent_id is not None:
                raise HTTPException(status_code=400, detail="Replies cannot be nested")

        comment_id = self.db.comments.add(
            article_id=article_id,
            author_id=author.id,
            author_name=author.display_name,
            content=content,
            parent_id=parent_id,
        )

        if parent is None:
            self.notifier.send_comment_notification(
                article.author_id, author.id, author.display_name, article.id, article.title
            )
        else:
            self.notifier.send_reply_notification(
                parent.author_id, author.id, author.display_name, article.id, article.title
            )

        return self.db.comments.get(comment_id)

    def like_comment(self, comment_id: str, user: DBUser) -> DBComment:
        """
        Like a comment or reply once per user and notify its author.

        Raises:
            HTTPException: 404 if the comment is missing, 409 if the user
                already liked it
        """
        comment = require_comment(self.db.comments.get(comment_id))
        if not self.db.comments.add_like(comment_id, user.id):
            raise HTTPException(status_code=409, detail="Already liked this comment")

        article = self.db.get_article(comment.article_id)
        self.notifier.send_comment_like_notification(
            comment.author_id,
            user.id,
            user.display_name,
            comment.article_id,
            article.title if article else "",
            comment.content,
        )
        return self.db.comments.get(comment_id)

    def delete_comment(self, comment_id: str, actor: DBUser):
        comment = require_comment(self.db.comments.get(comment_id))
        if comment.author_id != actor.id and not config.is_admin_user(actor.id, actor.email):
            raise HTTPException(status_code=403, detail="Not the author of this comment")
        self.db.comments.delete(comment_id)
        logger.info(f"Comment {comment_id} deleted by {actor.id}")
