"""
Notification repository - capped per-user notification lists and unread counters.
"""

import uuid
from datetime import datetime

from .connection import DatabaseConnection
from .converters import row_to_notification
from .models import DBNotification


class NotificationRepository:
    """Repository for notification operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(
        self,
        user_id: str,
        type: str,
        content: str,
        limit: int,
        sender_id: str | None = None,
        sender_name: str | None = None,
        article_id: str | None = None,
        article_title: str | None = None,
        trophy_id: str | None = None,
        badge_id: str | None = None,
    ) -> str:
        """
        Append a notification for a user.

        Bumps the user's unread counter and prunes the oldest entries so at
        most `limit` remain. Returns the notification ID.
        """
        notification_id = uuid.uuid4().hex
        with self._db.conn() as conn:
            seq = conn.execute(
                "SELECT COALESCE(MAX(seq), 0) + 1 AS next FROM notifications"
            ).fetchone()["next"]
            conn.execute(
                """INSERT INTO notifications
                   (id, seq, user_id, type, content, sender_id, sender_name,
                    article_id, article_title, trophy_id, badge_id, is_read, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0, ?)""",
                (notification_id, seq, user_id, type, content, sender_id,
                 sender_name, article_id, article_title, trophy_id, badge_id,
                 datetime.now().isoformat())
            )
            conn.execute(
                """INSERT INTO notification_counters (user_id, unread_count) VALUES (?, 1)
                   ON CONFLICT(user_id) DO UPDATE SET unread_count = unread_count + 1""",
                (user_id,)
            )

            # Prune past the cap, oldest first
            pruned = conn.execute(
                """SELECT id, is_read FROM notifications
                   WHERE user_id = ?
                   ORDER BY seq DESC
                   LIMIT -1 OFFSET ?""",
                (user_id, max(limit, 1))
            ).fetchall()
            if pruned:
                conn.executemany(
                    "DELETE FROM notifications WHERE id = ?",
                    [(row["id"],) for row in pruned]
                )
                unread_pruned = sum(1 for row in pruned if not row["is_read"])
                if unread_pruned:
                    conn.execute(
                        """UPDATE notification_counters
                           SET unread_count = MAX(0, unread_count - ?)
                           WHERE user_id = ?""",
                        (unread_pruned, user_id)
                    )
        return notification_id

    def get(self, notification_id: str) -> DBNotification | None:
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM notifications WHERE id = ?", (notification_id,)
            ).fetchone()
            return row_to_notification(row) if row else None

    def get_for_user(
        self,
        user_id: str,
        unread_only: bool = False,
    ) -> list[DBNotification]:
        """Get a user's notifications, newest first."""
        query = "SELECT * FROM notifications WHERE user_id = ?"
        if unread_only:
            query += " AND is_read = 0"
        query += " ORDER BY seq DESC"
        with self._db.conn() as conn:
            rows = conn.execute(query, (user_id,)).fetchall()
            return [row_to_notification(row) for row in rows]

    def get_unread_count(self, user_id: str) -> int:
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT unread_count FROM notification_counters WHERE user_id = ?",
                (user_id,)
            ).fetchone()
            return row["unread_count"] if row else 0

    def mark_read(self, user_id: str, notification_id: str) -> bool:
        """Mark one notification read. Returns False if it was already read or absent."""
        with self._db.conn() as conn:
            cursor = conn.execute(
                """UPDATE notifications SET is_read = 1
                   WHERE id = ? AND user_id = ? AND is_read = 0""",
                (notification_id, user_id)
            )
            if cursor.rowcount == 0:
                return False
            conn.execute(
                """UPDATE notification_counters
                   SET unread_count = MAX(0, unread_count - 1)
                   WHERE user_id = ?""",
                (user_id,)
            )
            return True

    def mark_all_read(self, user_id: str) -> int:
        """Mark every notification read. Returns how many changed."""
        with self._db.conn() as conn:
            cursor = conn.execute(
                "UPDATE notifications SET is_read = 1 WHERE user_id = ? AND is_read = 0",
                (user_id,)
            )
            conn.execute(
                "UPDATE notification_counters SET unread_count = 0 WHERE user_id = ?",
                (user_id,)
            )
            return cursor.rowcount
