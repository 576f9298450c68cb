"""
Notification service - emits user-facing notifications.

Wraps the notification repository with the message formats used for each
event type and the per-user cap from configuration.
"""

import logging

from .config import config
from .database import Database

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = ("like", "comment", "reply", "follow", "trophy", "badge", "useful")

# Comment likes quote this many leading characters of the comment
COMMENT_SNIPPET_LENGTH = 30


def comment_snippet(content: str) -> str:
    if len(content) > COMMENT_SNIPPET_LENGTH:
        return content[:COMMENT_SNIPPET_LENGTH] + "..."
    return content


class NotificationService:
    """
    Emits notifications for article, comment and achievement events.

    Activity events (likes on articles or comments, useful marks, comments
    and replies) are not sent to the user who caused them.
    """

    def __init__(self, db: Database, limit: int | None = None):
        self._db = db
        self._limit = limit if limit is not None else config.NOTIFICATION_LIMIT

    def notify(
        self,
        user_id: str,
        type: str,
        content: str,
        **related: str | None,
    ) -> str:
        """Append a notification for user_id. Returns the notification ID."""
        if type not in NOTIFICATION_TYPES:
            raise ValueError(f"Unknown notification type: {type}")

        notification_id = self._db.notifications.add(
            user_id=user_id,
            type=type,
            content=content,
            limit=self._limit,
            **related,
        )
        logger.debug(f"Notification {type} added for user {user_id}")
        return notification_id

    # ─────────────────────────────────────────────────────────────
    # Achievements
    # ─────────────────────────────────────────────────────────────

    def send_trophy_notification(self, user_id: str, trophy_id: str, trophy_title: str) -> str:
        return self.notify(
            user_id,
            "trophy",
            f'You earned the trophy "{trophy_title}"',
            trophy_id=trophy_id,
        )

    def send_badge_notification(self, user_id: str, badge_id: str, badge_name: str) -> str:
        return self.notify(
            user_id,
            "badge",
            f'Badge "{badge_name}" is now available',
            badge_id=badge_id,
        )

    def send_badge_selected_notification(self, user_id: str, badge_id: str, badge_name: str) -> str:
        return self.notify(
            user_id,
            "badge",
            f'You set your badge to "{badge_name}"',
            badge_id=badge_id,
        )

    # ─────────────────────────────────────────────────────────────
    # Article activity
    # ─────────────────────────────────────────────────────────────

    def send_like_notification(
        self,
        recipient_id: str,
        sender_id: str,
        sender_name: str,
        article_id: str,
        article_title: str,
    ) -> str | None:
        if recipient_id == sender_id:
            return None
        return self.notify(
            recipient_id,
            "like",
            f'{sender_name} liked your article "{article_title}"',
            sender_id=sender_id,
            sender_name=sender_name,
            article_id=article_id,
            article_title=article_title,
        )

    def send_useful_notification(
        self,
        recipient_id: str,
        sender_id: str,
        sender_name: str,
        article_id: str,
        article_title: str,
    ) -> str | None:
        if recipient_id == sender_id:
            return None
        return self.notify(
            recipient_id,
            "useful",
            f'{sender_name} found your article "{article_title}" useful',
            sender_id=sender_id,
            sender_name=sender_name,
            article_id=article_id,
            article_title=article_title,
        )

    def send_comment_notification(
        self,
        recipient_id: str,
        sender_id: str,
        sender_name: str,
        article_id: str,
        article_title: str,
    ) -> str | None:
        if recipient_id == sender_id:
            return None
        return self.notify(
            recipient_id,
            "comment",
            f'{sender_name} commented on "{article_title}"',
            sender_id=sender_id,
            sender_name=sender_name,
            article_id=article_id,
            article_title=article_title,
        )

    def send_reply_notification(
        self,
        recipient_id: str,
        sender_id: str,
        sender_name: str,
        article_id: str,
        article_title: str,
    ) -> str | None:
        if recipient_id == sender_id:
            return None
        return self.notify(
            recipient_id,
            "reply",
            f'{sender_name} replied to your comment on "{article_title}"',
            sender_id=sender_id,
            sender_name=sender_name,
            article_id=article_id,
            article_title=article_title,
        )

    def send_comment_like_notification(
        self,
        recipient_id: str,
        sender_id: str,
        sender_name: str,
        article_id: str,
        article_title: str,
        comment_content: str,
    ) -> str | None:
        """Like on a comment or reply. The content quotes the start of the comment."""
        if recipient_id == sender_id:
            return None
        return self.notify(
            recipient_id,
            "like",
            comment_snippet(comment_content),
            sender_id=sender_id,
            sender_name=sender_name,
            article_id=article_id,
            article_title=article_title,
        )
