"""
Summary repository - listing, counters and batch writes for article summaries.
"""

import json
from datetime import datetime

from .connection import DatabaseConnection
from .converters import row_to_summary
from .models import DBArticleSummary

SORT_ORDERS = {
    "newest": "created_at DESC, id",
    "score": "article_score DESC, created_at DESC",
    "likes": "like_count DESC, created_at DESC",
    "useful": "useful_count DESC, created_at DESC",
}


class SummaryRepository:
    """Repository for article summary operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get(self, article_id: str) -> DBArticleSummary | None:
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM article_summaries WHERE id = ?", (article_id,)
            ).fetchone()
            return row_to_summary(row) if row else None

    def get_many(
        self,
        tags: list[str] | None = None,
        author_id: str | None = None,
        sort: str = "newest",
        limit: int = 50,
        offset: int = 0,
    ) -> list[DBArticleSummary]:
        """List visible summaries. Every tag in tags must be present on a result."""
        query = "SELECT * FROM article_summaries WHERE is_hidden = 0"
        params: list = []

        if author_id is not None:
            query += " AND author_id = ?"
            params.append(author_id)
        for tag in tags or []:
            query += " AND EXISTS (SELECT 1 FROM json_each(article_summaries.tags) WHERE value = ?)"
            params.append(tag)

        query += f" ORDER BY {SORT_ORDERS.get(sort, SORT_ORDERS['newest'])} LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        with self._db.conn() as conn:
            rows = conn.execute(query, params).fetchall()
            return [row_to_summary(row) for row in rows]

    def get_all(self) -> list[DBArticleSummary]:
        with self._db.conn() as conn:
            rows = conn.execute(
                "SELECT * FROM article_summaries ORDER BY created_at, id"
            ).fetchall()
            return [row_to_summary(row) for row in rows]

    def get_by_author(self, author_id: str) -> list[DBArticleSummary]:
        with self._db.conn() as conn:
            rows = conn.execute(
                "SELECT * FROM article_summaries WHERE author_id = ? ORDER BY created_at DESC",
                (author_id,)
            ).fetchall()
            return [row_to_summary(row) for row in rows]

    def get_disliked(self, limit: int = 10) -> list[DBArticleSummary]:
        """Summaries with at least one dislike, most disliked first."""
        with self._db.conn() as conn:
            rows = conn.execute(
                """SELECT * FROM article_summaries
                   WHERE dislike_count > 0
                   ORDER BY dislike_count DESC, created_at DESC
                   LIMIT ?""",
                (limit,)
            ).fetchall()
            return [row_to_summary(row) for row in rows]

    def count(self) -> int:
        with self._db.conn() as conn:
            return conn.execute(
                "SELECT COUNT(*) AS cnt FROM article_summaries"
            ).fetchone()["cnt"]

    def update_score(self, article_id: str, article_score: int):
        with self._db.conn() as conn:
            conn.execute(
                "UPDATE article_summaries SET article_score = ? WHERE id = ?",
                (article_score, article_id)
            )

    def update_scores(self, scores: list[tuple[str, int]]):
        """Write a batch of (article_id, score) pairs in one transaction."""
        if not scores:
            return
        with self._db.conn() as conn:
            conn.executemany(
                "UPDATE article_summaries SET article_score = ? WHERE id = ?",
                [(score, article_id) for article_id, score in scores]
            )

    def upsert_many(self, summaries: list[DBArticleSummary]):
        """Overwrite a batch of summaries in one transaction."""
        if not summaries:
            return
        now = datetime.now().isoformat()
        with self._db.conn() as conn:
            conn.executemany(
                """INSERT INTO article_summaries
                   (id, title, description, tags, author, author_id, image_url,
                    like_count, useful_count, dislike_count, article_score,
                    created_at, updated_at, is_hidden)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                   title = excluded.title,
                   description = excluded.description,
                   tags = excluded.tags,
                   author = excluded.author,
                   author_id = excluded.author_id,
                   image_url = excluded.image_url,
                   like_count = excluded.like_count,
                   useful_count = excluded.useful_count,
                   dislike_count = excluded.dislike_count,
                   article_score = excluded.article_score,
                   created_at = excluded.created_at,
                   updated_at = excluded.updated_at,
                   is_hidden = excluded.is_hidden""",
                [
                    (s.id, s.title, s.description, json.dumps(s.tags), s.author,
                     s.author_id, s.image_url, s.like_count, s.useful_count,
                     s.dislike_count, s.article_score, s.created_at.isoformat(),
                     s.updated_at.isoformat() if s.updated_at else now, int(s.is_hidden))
                    for s in summaries
                ]
            )

    def delete(self, article_id: str):
        with self._db.conn() as conn:
            conn.execute("DELETE FROM article_summaries WHERE id = ?", (article_id,))
