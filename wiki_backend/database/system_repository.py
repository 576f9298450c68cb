"""
System repository - timestamps of admin maintenance runs.
"""

import json
from datetime import datetime

from .connection import DatabaseConnection
from .converters import row_to_system_marker
from .models import DBSystemMarker


class SystemRepository:
    """Repository for system markers (last-run timestamps)."""

    LAST_UPDATED = "lastUpdated"
    TROPHIES_LAST_UPDATED = "trophiesLastUpdated"
    OTHER_LAST_UPDATED = "otherLastUpdated"
    INDEX_LAST_REBUILT = "indexLastRebuilt"
    AUTHOR_STATS_LAST_UPDATED = "authorStatsLastUpdated"
    CACHE_STATUS = "cacheStatus"

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get(self, key: str) -> DBSystemMarker | None:
        """Get a marker."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM system_markers WHERE key = ?", (key,)
            ).fetchone()
            return row_to_system_marker(row) if row else None

    def set(self, key: str, actor: str | None = None, data: dict | None = None) -> datetime:
        """Record that the keyed job ran now. Returns the timestamp written."""
        now = datetime.now()
        with self._db.conn() as conn:
            conn.execute(
                """INSERT INTO system_markers (key, timestamp, actor, data)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET
                   timestamp = excluded.timestamp, actor = excluded.actor,
                   data = excluded.data""",
                (key, now.isoformat(), actor, json.dumps(data) if data is not None else None)
            )
        return now

    def get_all(self) -> dict[str, DBSystemMarker]:
        """Get all markers keyed by name."""
        with self._db.conn() as conn:
            rows = conn.execute("SELECT * FROM system_markers").fetchall()
            return {row["key"]: row_to_system_marker(row) for row in rows}
