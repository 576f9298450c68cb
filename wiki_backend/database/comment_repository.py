"""
Comment repository - comments and replies on articles.
"""

import sqlite3
import uuid
from datetime import datetime

from .connection import DatabaseConnection
from .converters import row_to_comment
from .models import DBComment


class CommentRepository:
    """Repository for comment operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(
        self,
        article_id: str,
        author_id: str,
        author_name: str,
        content: str,
        parent_id: str | None = None,
    ) -> str:
        """Add a comment, or a reply when parent_id is set. Returns comment ID."""
        comment_id = uuid.uuid4().hex
        with self._db.conn() as conn:
            conn.execute(
                """INSERT INTO comments
                   (id, article_id, parent_id, author_id, author_name, content, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (comment_id, article_id, parent_id, author_id, author_name,
                 content, datetime.now().isoformat())
            )
        return comment_id

    def get(self, comment_id: str) -> DBComment | None:
        with self._db.conn() as conn:
            row = conn.execute(
                """SELECT c.*,
                   (SELECT COUNT(*) FROM comments r WHERE r.parent_id = c.id) AS reply_count
                   FROM comments c WHERE c.id = ?""",
                (comment_id,)
            ).fetchone()
            return row_to_comment(row) if row else None

    def get_for_article(
        self,
        article_id: str,
        limit: int = 20,
        offset: int = 0,
    ) -> list[DBComment]:
        """Top-level comments on an article, newest first."""
        with self._db.conn() as conn:
            rows = conn.execute(
                """SELECT c.*,
                   (SELECT COUNT(*) FROM comments r WHERE r.parent_id = c.id) AS reply_count
                   FROM comments c
                   WHERE c.article_id = ? AND c.parent_id IS NULL
                   ORDER BY c.created_at DESC, c.rowid DESC
                   LIMIT ? OFFSET ?""",
                (article_id, limit, offset)
            ).fetchall()
            return [row_to_comment(row) for row in rows]

    def get_replies(
        self,
        parent_id: str,
        limit: int = 5,
        offset: int = 0,
    ) -> list[DBComment]:
        """Replies to a comment, oldest first."""
        with self._db.conn() as conn:
            rows = conn.execute(
                """SELECT * FROM comments
                   WHERE parent_id = ?
                   ORDER BY created_at, rowid
                   LIMIT ? OFFSET ?""",
                (parent_id, limit, offset)
            ).fetchall()
            return [row_to_comment(row) for row in rows]

    def add_like(self, comment_id: str, user_id: str) -> bool:
        """
        Record a user's like and bump the comment's counter.

        Returns False if the user already liked this comment.
        """
        with self._db.conn() as conn:
            try:
                conn.execute(
                    "INSERT INTO comment_likes (comment_id, user_id) VALUES (?, ?)",
                    (comment_id, user_id)
                )
            except sqlite3.IntegrityError:
                return False
            conn.execute(
                "UPDATE comments SET like_count = like_count + 1 WHERE id = ?",
                (comment_id,)
            )
        return True

    def delete(self, comment_id: str) -> bool:
        """Delete a comment; its replies go with it."""
        with self._db.conn() as conn:
            cursor = conn.execute("DELETE FROM comments WHERE id = ?", (comment_id,))
            return cursor.rowcount > 0
