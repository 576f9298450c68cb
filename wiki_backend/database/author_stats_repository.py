"""
Author stats repository - per-author aggregates derived from summaries.
"""

from datetime import datetime

from .connection import DatabaseConnection
from .converters import row_to_author_stats
from .models import DBAuthorStats


class AuthorStatsRepository:
    """Repository for author aggregate operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get(self, author_id: str) -> DBAuthorStats | None:
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM author_stats WHERE author_id = ?", (author_id,)
            ).fetchone()
            return row_to_author_stats(row) if row else None

    def get_all(self, limit: int | None = None, offset: int = 0) -> list[DBAuthorStats]:
        """Get aggregates ordered by total score."""
        query = "SELECT * FROM author_stats ORDER BY article_score_sum DESC, author_id"
        params: list = []
        if limit is not None:
            query += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])
        with self._db.conn() as conn:
            rows = conn.execute(query, params).fetchall()
            return [row_to_author_stats(row) for row in rows]

    def replace_all(self, stats: dict[str, DBAuthorStats]):
        """Replace the whole table with the given aggregates in one transaction."""
        now = datetime.now().isoformat()
        with self._db.conn() as conn:
            conn.execute("DELETE FROM author_stats")
            conn.executemany(
                """INSERT INTO author_stats
                   (author_id, like_count, useful_count, article_count,
                    article_score_sum, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                [
                    (s.author_id, s.like_count, s.useful_count, s.article_count,
                     s.article_score_sum, now)
                    for s in stats.values()
                ]
            )

    def upsert(self, stats: DBAuthorStats):
        with self._db.conn() as conn:
            conn.execute(
                """INSERT INTO author_stats
                   (author_id, like_count, useful_count, article_count,
                    article_score_sum, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)
                   ON CONFLICT(author_id) DO UPDATE SET
                   like_count = excluded.like_count,
                   useful_count = excluded.useful_count,
                   article_count = excluded.article_count,
                   article_score_sum = excluded.article_score_sum,
                   updated_at = excluded.updated_at""",
                (stats.author_id, stats.like_count, stats.useful_count,
                 stats.article_count, stats.article_score_sum,
                 datetime.now().isoformat())
            )

    def delete(self, author_id: str):
        with self._db.conn() as conn:
            conn.execute("DELETE FROM author_stats WHERE author_id = ?", (author_id,))
