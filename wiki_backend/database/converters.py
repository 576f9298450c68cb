"""
Database row converters - convert SQLite rows to dataclasses.
"""

import json
import sqlite3
from datetime import datetime

from .models import (
    DBArticle,
    DBArticleSummary,
    DBAuthorStats,
    DBComment,
    DBNotification,
    DBSystemMarker,
    DBTag,
    DBUser,
)


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _parse_json_list(value: str | None) -> list:
    if not value:
        return []
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        return []
    return parsed if isinstance(parsed, list) else []


def safe_get(row: sqlite3.Row, col: str, default=None):
    """Read an optional column; absent in some queries or older databases."""
    try:
        return row[col]
    except (IndexError, KeyError):
        return default


def row_to_article(row: sqlite3.Row) -> DBArticle:
    """Convert a database row to a DBArticle."""
    return DBArticle(
        id=row["id"],
        title=row["title"],
        description=row["description"] or "",
        content=row["content"] or "",
        tags=_parse_json_list(row["tags"]),
        author=row["author"] or "",
        author_id=row["author_id"] or "",
        image_url=row["image_url"],
        like_count=row["like_count"] or 0,
        useful_count=row["useful_count"] or 0,
        dislike_count=row["dislike_count"] or 0,
        created_at=_parse_datetime(row["created_at"]) or datetime.now(),
        updated_at=_parse_datetime(row["updated_at"]),
        is_hidden=bool(safe_get(row, "is_hidden", 0)),
        hidden_reason=safe_get(row, "hidden_reason"),
        hidden_at=_parse_datetime(safe_get(row, "hidden_at")),
    )


def row_to_summary(row: sqlite3.Row) -> DBArticleSummary:
    """Convert a database row to a DBArticleSummary."""
    return DBArticleSummary(
        id=row["id"],
        title=row["title"],
        description=row["description"] or "",
        tags=_parse_json_list(row["tags"]),
        author=row["author"] or "",
        author_id=row["author_id"] or "",
        image_url=row["image_url"],
        like_count=row["like_count"] or 0,
        useful_count=row["useful_count"] or 0,
        dislike_count=row["dislike_count"] or 0,
        article_score=row["article_score"] or 0,
        created_at=_parse_datetime(row["created_at"]) or datetime.now(),
        updated_at=_parse_datetime(row["updated_at"]),
        is_hidden=bool(safe_get(row, "is_hidden", 0)),
    )


def row_to_author_stats(row: sqlite3.Row) -> DBAuthorStats:
    """Convert a database row to a DBAuthorStats."""
    return DBAuthorStats(
        author_id=row["author_id"],
        like_count=row["like_count"] or 0,
        useful_count=row["useful_count"] or 0,
        article_count=row["article_count"] or 0,
        article_score_sum=row["article_score_sum"] or 0,
        updated_at=_parse_datetime(row["updated_at"]),
    )


def row_to_user(row: sqlite3.Row) -> DBUser:
    """Convert a database row to a DBUser."""
    stats = None
    if row["stats"]:
        try:
            stats = json.loads(row["stats"])
        except json.JSONDecodeError:
            pass

    return DBUser(
        id=row["id"],
        email=row["email"],
        display_name=row["display_name"],
        bio=row["bio"] or "",
        photo_url=row["photo_url"],
        selected_badge=row["selected_badge"],
        earned_trophies=_parse_json_list(row["earned_trophies"]),
        available_badges=_parse_json_list(row["available_badges"]),
        stats=stats,
        created_at=_parse_datetime(row["created_at"]) or datetime.now(),
        last_login_at=_parse_datetime(row["last_login_at"]),
        updated_at=_parse_datetime(safe_get(row, "updated_at")),
    )


def row_to_comment(row: sqlite3.Row) -> DBComment:
    """Convert a database row to a DBComment."""
    return DBComment(
        id=row["id"],
        article_id=row["article_id"],
        parent_id=row["parent_id"],
        author_id=row["author_id"],
        author_name=row["author_name"],
        content=row["content"],
        like_count=row["like_count"] or 0,
        created_at=_parse_datetime(row["created_at"]) or datetime.now(),
        reply_count=safe_get(row, "reply_count", 0) or 0,
    )


def row_to_notification(row: sqlite3.Row) -> DBNotification:
    """Convert a database row to a DBNotification."""
    return DBNotification(
        id=row["id"],
        user_id=row["user_id"],
        type=row["type"],
        content=row["content"],
        is_read=bool(row["is_read"]),
        created_at=_parse_datetime(row["created_at"]) or datetime.now(),
        sender_id=row["sender_id"],
        sender_name=row["sender_name"],
        article_id=row["article_id"],
        article_title=row["article_title"],
        trophy_id=row["trophy_id"],
        badge_id=row["badge_id"],
    )


def row_to_tag(row: sqlite3.Row) -> DBTag:
    """Convert a database row to a DBTag."""
    return DBTag(
        name=row["name"],
        count=row["count"] or 0,
        last_used=_parse_datetime(row["last_used"]),
    )


def row_to_system_marker(row: sqlite3.Row) -> DBSystemMarker:
    """Convert a database row to a DBSystemMarker."""
    data = None
    if row["data"]:
        try:
            data = json.loads(row["data"])
        except json.JSONDecodeError:
            pass

    return DBSystemMarker(
        key=row["key"],
        timestamp=_parse_datetime(row["timestamp"]) or datetime.now(),
        actor=row["actor"],
        data=data,
    )
