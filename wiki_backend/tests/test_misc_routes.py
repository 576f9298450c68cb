"""
Tests for misc routes: health check, tags, rate limiting.
"""

import pytest

from wiki_backend import __version__
from wiki_backend.config import Config, config


class TestHealthCheck:
    """Tests for /status endpoint."""

    def test_health_check_returns_ok(self, client):
        """Health check should return status ok."""
        response = client.get("/status")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"] == __version__

    def test_admin_configured(self, client):
        assert client.get("/status").json()["admin_configured"] is True

    def test_admin_not_configured(self, client, monkeypatch):
        monkeypatch.setattr(Config, "ADMIN_EMAIL", "")
        assert client.get("/status").json()["admin_configured"] is False


class TestTags:
    """Tests for /tags endpoint."""

    def test_tags_follow_article_writes(self, client, alice, rich_content):
        for tags in (["python", "web"], ["python"]):
            client.post(
                "/articles",
                json={"title": "T", "content": rich_content, "tags": tags},
                headers={"user-id": alice.id},
            )
        assert client.get("/tags").json() == [
            {"name": "python", "count": 2},
            {"name": "web", "count": 1},
        ]


class TestRateLimiting:
    """Requests past the per-minute limit are rejected."""

    @pytest.mark.skipif(config.RATE_LIMIT_PER_MINUTE <= 0, reason="rate limiting disabled")
    def test_limit_exceeded_is_429(self, client):
        statuses = [
            client.get("/status").status_code
            for _ in range(config.RATE_LIMIT_PER_MINUTE + 1)
        ]
        assert statuses[-1] == 429
        assert statuses[0] == 200
