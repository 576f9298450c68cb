"""
Pytest fixtures for backend tests.
"""

import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from wiki_backend.config import Config, state
from wiki_backend.database import Database
from wiki_backend.cache import create_cache
from wiki_backend.rate_limit import reset_rate_limits
from wiki_backend.server import app

ADMIN_EMAIL = "admin@example.com"
ADMIN_USER_ID = "admin-1"

RICH_CONTENT = """# Heading

Some **bold** and *italic* text with a [link](https://example.com).

![diagram](https://example.com/diagram.png)

- first
- second

1. one
2. two
""" + "Body text. " * 80


@pytest.fixture(autouse=True)
def admin_email(monkeypatch):
    """Configure the admin account for every test."""
    monkeypatch.setattr(Config, "ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setattr(Config, "ADMIN_USER_ID", ADMIN_USER_ID)
    return ADMIN_EMAIL


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        yield Path(f.name)
    # Cleanup
    if os.path.exists(f.name):
        os.unlink(f.name)


@pytest.fixture
def test_db(temp_db_path):
    """Create a test database instance."""
    db = Database(temp_db_path)
    yield db


@pytest.fixture
def admin(test_db):
    user, _ = test_db.users.get_or_create(ADMIN_USER_ID, email=ADMIN_EMAIL, display_name="Admin")
    return user


@pytest.fixture
def alice(test_db):
    user, _ = test_db.users.get_or_create("alice", email="alice@example.com", display_name="Alice")
    return user


@pytest.fixture
def bob(test_db):
    user, _ = test_db.users.get_or_create("bob", email="bob@example.com", display_name="Bob")
    return user


@pytest.fixture
def client(test_db, admin, alice, bob):
    """Create a test client with an isolated database, cache and seeded users."""
    # Store original state
    original_db = state.db
    original_cache = state.cache

    # Set up test state with fresh instances
    state.db = test_db
    state.cache = create_cache(max_size=64, default_ttl=60)
    reset_rate_limits()

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    # Restore original state
    state.db = original_db
    state.cache = original_cache


@pytest.fixture
def rich_content():
    """Markdown body using every construct, long enough for full length credit."""
    return RICH_CONTENT


@pytest.fixture
def seed_article(test_db):
    """Factory inserting an article and its summary directly, bypassing the API."""
    def _seed(author, title="Test Article", content=RICH_CONTENT, tags=None, score=0):
        return test_db.articles.add(
            title=title,
            content=content,
            author=author.display_name,
            author_id=author.id,
            article_score=score,
            tags=tags or [],
        )
    return _seed
