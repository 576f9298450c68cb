"""
Database models - dataclasses for database entities.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class DBArticle:
    """Full article record."""
    id: str
    title: str
    description: str
    content: str
    tags: list[str]
    author: str
    author_id: str
    created_at: datetime
    image_url: str | None = None
    like_count: int = 0
    useful_count: int = 0
    dislike_count: int = 0
    updated_at: datetime | None = None
    is_hidden: bool = False
    hidden_reason: str | None = None
    hidden_at: datetime | None = None


@dataclass
class DBArticleSummary:
    """Denormalized article projection with counters and score."""
    id: str
    title: str
    description: str
    tags: list[str]
    author: str
    author_id: str
    created_at: datetime
    image_url: str | None = None
    like_count: int = 0
    useful_count: int = 0
    dislike_count: int = 0
    article_score: int = 0
    updated_at: datetime | None = None
    is_hidden: bool = False


@dataclass
class DBAuthorStats:
    author_id: str
    like_count: int
    useful_count: int
    article_count: int
    article_score_sum: int
    updated_at: datetime | None = None

    @property
    def average_score(self) -> float:
        if self.article_count <= 0:
            return 0.0
        return self.article_score_sum / self.article_count


@dataclass
class DBUser:
    id: str
    email: str | None
    display_name: str
    created_at: datetime
    bio: str = ""
    photo_url: str | None = None
    selected_badge: str | None = None
    earned_trophies: list[str] = field(default_factory=list)
    available_badges: list[str] = field(default_factory=list)
    stats: dict | None = None
    last_login_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class DBComment:
    id: str
    article_id: str
    author_id: str
    author_name: str
    content: str
    created_at: datetime
    parent_id: str | None = None  # None for top-level comments
    like_count: int = 0
    reply_count: int = 0


@dataclass
class DBNotification:
    id: str
    user_id: str
    type: str  # like, comment, reply, follow, trophy, badge, useful
    content: str
    is_read: bool
    created_at: datetime
    sender_id: str | None = None
    sender_name: str | None = None
    article_id: str | None = None
    article_title: str | None = None
    trophy_id: str | None = None
    badge_id: str | None = None


@dataclass
class DBTag:
    name: str
    count: int
    last_used: datetime | None = None


@dataclass
class DBSystemMarker:
    key: str
    timestamp: datetime
    actor: str | None = None
    data: dict | None = None
