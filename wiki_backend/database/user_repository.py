"""
Repository for user operations.
"""

import json
from datetime import datetime

from .connection import DatabaseConnection
from .converters import row_to_user
from .models import DBUser

ANONYMOUS_NAME = "Anonymous"


class UserRepository:
    """Repository for user CRUD operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get_or_create(
        self,
        user_id: str,
        email: str | None = None,
        display_name: str | None = None,
        photo_url: str | None = None,
    ) -> tuple[DBUser, bool]:
        """
        Create a profile on first login, or refresh it on later logins.

        Args:
            user_id: Identity-provider user ID
            email: User's email address
            display_name: Display name; defaults to the email's local part
            photo_url: Avatar URL

        Returns:
            Tuple of (user, created)
        """
        now = datetime.now().isoformat()
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT id FROM users WHERE id = ?", (user_id,)
            ).fetchone()

            if row:
                conn.execute(
                    "UPDATE users SET last_login_at = ? WHERE id = ?",
                    (now, user_id)
                )
                if display_name:
                    conn.execute(
                        "UPDATE users SET display_name = ? WHERE id = ?",
                        (display_name, user_id)
                    )
                if photo_url:
                    conn.execute(
                        "UPDATE users SET photo_url = ? WHERE id = ?",
                        (photo_url, user_id)
                    )
                created = False
            else:
                name = display_name or (email.split("@")[0] if email else "") or ANONYMOUS_NAME
                conn.execute(
                    """INSERT INTO users
                       (id, email, display_name, bio, photo_url, created_at, last_login_at)
                       VALUES (?, ?, ?, '', ?, ?, ?)""",
                    (user_id, email, name, photo_url, now, now)
                )
                created = True

            user_row = conn.execute(
                "SELECT * FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            return row_to_user(user_row), created

    def get(self, user_id: str) -> DBUser | None:
        """Get user by ID."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            return row_to_user(row) if row else None

    def update_profile(
        self,
        user_id: str,
        display_name: str | None = None,
        bio: str | None = None,
        photo_url: str | None = None,
    ):
        """Update user-editable profile fields."""
        with self._db.conn() as conn:
            if display_name is not None:
                conn.execute(
                    "UPDATE users SET display_name = ? WHERE id = ?",
                    (display_name, user_id)
                )
            if bio is not None:
                conn.execute(
                    "UPDATE users SET bio = ? WHERE id = ?",
                    (bio, user_id)
                )
            if photo_url is not None:
                conn.execute(
                    "UPDATE users SET photo_url = ? WHERE id = ?",
                    (photo_url, user_id)
                )
            conn.execute(
                "UPDATE users SET updated_at = ? WHERE id = ?",
                (datetime.now().isoformat(), user_id)
            )

    def set_selected_badge(self, user_id: str, badge_id: str | None):
        with self._db.conn() as conn:
            conn.execute(
                "UPDATE users SET selected_badge = ?, updated_at = ? WHERE id = ?",
                (badge_id, datetime.now().isoformat(), user_id)
            )

    def update_achievements(
        self,
        user_id: str,
        earned_trophies: list[str],
        available_badges: list[str],
        stats: dict,
    ):
        """Persist evaluated trophies, badges and the stats they came from."""
        with self._db.conn() as conn:
            conn.execute(
                """UPDATE users SET
                   earned_trophies = ?, available_badges = ?, stats = ?, updated_at = ?
                   WHERE id = ?""",
                (json.dumps(earned_trophies), json.dumps(available_badges),
                 json.dumps(stats), datetime.now().isoformat(), user_id)
            )
