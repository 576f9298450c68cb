"""
Database connection management and schema initialization.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


class DatabaseConnection:
    """Manages database connection and schema."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @contextmanager
    def conn(self) -> Iterator[sqlite3.Connection]:
        """Get database connection with row factory.

        Everything executed inside one block commits together.
        """
        connection = sqlite3.connect(self.db_path)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        try:
            yield connection
            connection.commit()
        except Exception:
            connection.rollback()
            raise
        finally:
            connection.close()

    def _init_schema(self):
        """Initialize database schema."""
        with self.conn() as connection:
            connection.executescript("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    email TEXT,
                    display_name TEXT NOT NULL,
                    bio TEXT DEFAULT '',
                    photo_url TEXT,
                    selected_badge TEXT,
                    earned_trophies TEXT DEFAULT '[]',
                    available_badges TEXT DEFAULT '[]',
                    stats TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    last_login_at TIMESTAMP,
                    updated_at TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS articles (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    description TEXT DEFAULT '',
                    content TEXT DEFAULT '',
                    tags TEXT DEFAULT '[]',
                    author TEXT DEFAULT '',
                    author_id TEXT DEFAULT '',
                    image_url TEXT,
                    like_count INTEGER DEFAULT 0,
                    useful_count INTEGER DEFAULT 0,
                    dislike_count INTEGER DEFAULT 0,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP
                );

                -- Denormalized projection of articles used for listing and stats.
                -- No foreign key: a summary can outlive its record.
                CREATE TABLE IF NOT EXISTS article_summaries (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    description TEXT DEFAULT '',
                    tags TEXT DEFAULT '[]',
                    author TEXT DEFAULT '',
                    author_id TEXT DEFAULT '',
                    image_url TEXT,
                    like_count INTEGER DEFAULT 0,
                    useful_count INTEGER DEFAULT 0,
                    dislike_count INTEGER DEFAULT 0,
                    article_score INTEGER DEFAULT 0,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS author_stats (
                    author_id TEXT PRIMARY KEY,
                    like_count INTEGER NOT NULL DEFAULT 0,
                    useful_count INTEGER NOT NULL DEFAULT 0,
                    article_count INTEGER NOT NULL DEFAULT 0,
                    article_score_sum INTEGER NOT NULL DEFAULT 0,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS reactions (
                    article_id TEXT NOT NULL REFERENCES articles(id) ON DELETE CASCADE,
                    user_id TEXT NOT NULL,
                    kind TEXT NOT NULL CHECK(kind IN ('like', 'useful', 'dislike')),
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (article_id, user_id, kind)
                );

                CREATE TABLE IF NOT EXISTS comments (
                    id TEXT PRIMARY KEY,
                    article_id TEXT NOT NULL REFERENCES articles(id) ON DELETE CASCADE,
                    parent_id TEXT REFERENCES comments(id) ON DELETE CASCADE,
                    author_id TEXT NOT NULL,
                    author_name TEXT NOT NULL,
                    content TEXT NOT NULL,
                    like_count INTEGER DEFAULT 0,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS comment_likes (
                    comment_id TEXT NOT NULL REFERENCES comments(id) ON DELETE CASCADE,
                    user_id TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (comment_id, user_id)
                );

                CREATE TABLE IF NOT EXISTS tags (
                    name TEXT PRIMARY KEY,
                    count INTEGER NOT NULL DEFAULT 0,
                    last_used TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS notifications (
                    id TEXT PRIMARY KEY,
                    seq INTEGER NOT NULL,
                    user_id TEXT NOT NULL,
                    type TEXT NOT NULL CHECK(type IN
                        ('like', 'comment', 'reply', 'follow', 'trophy', 'badge', 'useful')),
                    content TEXT NOT NULL,
                    sender_id TEXT,
                    sender_name TEXT,
                    article_id TEXT,
                    article_title TEXT,
                    trophy_id TEXT,
                    badge_id TEXT,
                    is_read INTEGER DEFAULT 0,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS notification_counters (
                    user_id TEXT PRIMARY KEY,
                    unread_count INTEGER NOT NULL DEFAULT 0
                );

                CREATE TABLE IF NOT EXISTS system_markers (
                    key TEXT PRIMARY KEY,
                    timestamp TIMESTAMP NOT NULL,
                    actor TEXT,
                    data TEXT
                );

                CREATE INDEX IF NOT EXISTS idx_articles_author ON articles(author_id);
                CREATE INDEX IF NOT EXISTS idx_summaries_author ON article_summaries(author_id);
                CREATE INDEX IF NOT EXISTS idx_summaries_created ON article_summaries(created_at DESC);
                CREATE INDEX IF NOT EXISTS idx_summaries_score ON article_summaries(article_score DESC);
                CREATE INDEX IF NOT EXISTS idx_summaries_dislikes ON article_summaries(dislike_count DESC);
                CREATE INDEX IF NOT EXISTS idx_comments_article ON comments(article_id, parent_id, created_at DESC);
                CREATE INDEX IF NOT EXISTS idx_comments_parent ON comments(parent_id, created_at);
                CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications(user_id, seq DESC);
            """)

            # Migrations
            self._migrate_add_column(connection, "users", "updated_at", "TIMESTAMP")
            self._migrate_add_column(connection, "articles", "is_hidden", "INTEGER DEFAULT 0")
            self._migrate_add_column(connection, "articles", "hidden_reason", "TEXT")
            self._migrate_add_column(connection, "articles", "hidden_at", "TIMESTAMP")
            self._migrate_add_column(connection, "article_summaries", "is_hidden", "INTEGER DEFAULT 0")

    def _migrate_add_column(
        self,
        conn: sqlite3.Connection,
        table: str,
        column: str,
        column_type: str
    ):
        """Add a column to a table if it doesn't exist."""
        cursor = conn.execute(f"PRAGMA table_info({table})")
        columns = [row[1] for row in cursor.fetchall()]
        if column not in columns:
            conn.execute(f"ALTER TABLE {table} ADD COLUMN {column} {column_type}")
