"""
Article repository - CRUD operations for full article records.

Writes that change a record also write its summary row in the same
transaction, so the projection never lags behind a committed edit.
"""

import json
import sqlite3
import uuid
from datetime import datetime
from typing import Iterator

from .connection import DatabaseConnection
from .converters import row_to_article
from .models import DBArticle

REACTION_COLUMNS = {
    "like": "like_count",
    "useful": "useful_count",
    "dislike": "dislike_count",
}


class ArticleRepository:
    """Repository for article record operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(
        self,
        title: str,
        content: str,
        author: str,
        author_id: str,
        article_score: int,
        description: str = "",
        tags: list[str] | None = None,
        image_url: str | None = None,
        article_id: str | None = None,
        created_at: datetime | None = None,
    ) -> str:
        """Add an article record and its summary. Returns the article ID."""
        article_id = article_id or uuid.uuid4().hex
        now = datetime.now().isoformat()
        created = created_at.isoformat() if created_at else now
        tags_json = json.dumps(tags or [])

        with self._db.conn() as conn:
            conn.execute(
                """INSERT INTO articles
                   (id, title, description, content, tags, author, author_id,
                    image_url, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (article_id, title, description, content, tags_json, author,
                 author_id, image_url, created, now)
            )
            conn.execute(
                """INSERT INTO article_summaries
                   (id, title, description, tags, author, author_id, image_url,
                    article_score, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (article_id, title, description, tags_json, author, author_id,
                 image_url, article_score, created, now)
            )
        return article_id

    def get(self, article_id: str) -> DBArticle | None:
        """Get single article by ID."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM articles WHERE id = ?", (article_id,)
            ).fetchone()
            return row_to_article(row) if row else None

    def iter_all(self, chunk_size: int = 500) -> Iterator[DBArticle]:
        """Iterate every article record, loading chunk_size rows at a time."""
        offset = 0
        while True:
            with self._db.conn() as conn:
                rows = conn.execute(
                    "SELECT * FROM articles ORDER BY created_at, id LIMIT ? OFFSET ?",
                    (chunk_size, offset)
                ).fetchall()
            if not rows:
                return
            for row in rows:
                yield row_to_article(row)
            offset += len(rows)

    def update(
        self,
        article_id: str,
        article_score: int,
        title: str | None = None,
        description: str | None = None,
        content: str | None = None,
        tags: list[str] | None = None,
        image_url: str | None = None,
        clear_image: bool = False,
    ):
        """Update editable fields on the record and mirror them to the summary."""
        shared: dict[str, object] = {}
        if title is not None:
            shared["title"] = title
        if description is not None:
            shared["description"] = description
        if tags is not None:
            shared["tags"] = json.dumps(tags)
        if clear_image:
            shared["image_url"] = None
        elif image_url is not None:
            shared["image_url"] = image_url
        shared["updated_at"] = datetime.now().isoformat()

        record_fields = dict(shared)
        if content is not None:
            record_fields["content"] = content
        summary_fields = dict(shared)
        summary_fields["article_score"] = article_score

        with self._db.conn() as conn:
            self._update_columns(conn, "articles", article_id, record_fields)
            self._update_columns(conn, "article_summaries", article_id, summary_fields)

    def delete(self, article_id: str) -> bool:
        """Delete an article record and its summary. Returns True if it existed."""
        with self._db.conn() as conn:
            cursor = conn.execute("DELETE FROM articles WHERE id = ?", (article_id,))
            conn.execute("DELETE FROM article_summaries WHERE id = ?", (article_id,))
            return cursor.rowcount > 0

    # --- Reactions ---

    def add_reaction(self, article_id: str, user_id: str, kind: str) -> bool:
        """
        Record a user's reaction and bump the matching counter.

        Returns False if the user already registered this kind of reaction.
        """
        column = REACTION_COLUMNS[kind]
        with self._db.conn() as conn:
            try:
                conn.execute(
                    "INSERT INTO reactions (article_id, user_id, kind) VALUES (?, ?, ?)",
                    (article_id, user_id, kind)
                )
            except sqlite3.IntegrityError:
                return False
            conn.execute(
                f"UPDATE articles SET {column} = {column} + 1 WHERE id = ?",
                (article_id,)
            )
            conn.execute(
                f"UPDATE article_summaries SET {column} = {column} + 1 WHERE id = ?",
                (article_id,)
            )
            return True

    def reset_dislikes(self, article_id: str, article_score: int):
        """Zero the dislike counter on record and summary, storing the new score."""
        with self._db.conn() as conn:
            conn.execute(
                "UPDATE articles SET dislike_count = 0 WHERE id = ?",
                (article_id,)
            )
            conn.execute(
                "UPDATE article_summaries SET dislike_count = 0, article_score = ? WHERE id = ?",
                (article_score, article_id)
            )
            conn.execute(
                "DELETE FROM reactions WHERE article_id = ? AND kind = 'dislike'",
                (article_id,)
            )

    # --- Moderation ---

    def set_hidden(self, article_id: str, reason: str):
        """Hide an article from listings, recording why and when on the record."""
        with self._db.conn() as conn:
            conn.execute(
                "UPDATE articles SET is_hidden = 1, hidden_reason = ?, hidden_at = ? WHERE id = ?",
                (reason, datetime.now().isoformat(), article_id)
            )
            conn.execute(
                "UPDATE article_summaries SET is_hidden = 1 WHERE id = ?",
                (article_id,)
            )

    # --- Helpers ---

    @staticmethod
    def _update_columns(
        conn: sqlite3.Connection,
        table: str,
        article_id: str,
        fields: dict[str, object],
    ):
        if not fields:
            return
        assignments = ", ".join(f"{column} = ?" for column in fields)
        conn.execute(
            f"UPDATE {table} SET {assignments} WHERE id = ?",
            (*fields.values(), article_id)
        )
