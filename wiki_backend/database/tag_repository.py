"""
Tag repository - usage counts per tag.
"""

from datetime import datetime

from .connection import DatabaseConnection
from .converters import row_to_tag
from .models import DBTag


class TagRepository:
    """Repository for tag counts."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get_all(self, limit: int = 100) -> list[DBTag]:
        with self._db.conn() as conn:
            rows = conn.execute(
                "SELECT * FROM tags ORDER BY count DESC, name LIMIT ?",
                (limit,)
            ).fetchall()
            return [row_to_tag(row) for row in rows]

    def get(self, name: str) -> DBTag | None:
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM tags WHERE name = ?", (name,)
            ).fetchone()
            return row_to_tag(row) if row else None

    def adjust(self, added: list[str] | None = None, removed: list[str] | None = None):
        """Increment counts for added tags, decrement for removed ones."""
        now = datetime.now().isoformat()
        with self._db.conn() as conn:
            for name in set(added or []):
                conn.execute(
                    """INSERT INTO tags (name, count, last_used) VALUES (?, 1, ?)
                       ON CONFLICT(name) DO UPDATE SET
                       count = count + 1, last_used = excluded.last_used""",
                    (name, now)
                )
            for name in set(removed or []):
                conn.execute(
                    "UPDATE tags SET count = count - 1 WHERE name = ?",
                    (name,)
                )
            conn.execute("DELETE FROM tags WHERE count <= 0")

    def clear(self):
        with self._db.conn() as conn:
            conn.execute("DELETE FROM tags")

    def insert_many(self, counts: list[tuple[str, int]]):
        """Write a batch of (name, count) rows in one transaction."""
        if not counts:
            return
        now = datetime.now().isoformat()
        with self._db.conn() as conn:
            conn.executemany(
                """INSERT INTO tags (name, count, last_used) VALUES (?, ?, ?)
                   ON CONFLICT(name) DO UPDATE SET
                   count = excluded.count, last_used = excluded.last_used""",
                [(name, count, now) for name, count in counts]
            )
