"""
Tests for admin routes.
"""

import pytest

from wiki_backend.services.recalculation_service import RecalculationService

ADMIN_ENDPOINTS = [
    ("post", "/api/admin/recalculate-scores"),
    ("post", "/api/admin/recalculate-trophies"),
    ("post", "/api/admin/recalculate-all"),
    ("post", "/api/admin/sync-author-stats"),
    ("post", "/api/admin/rebuild-index"),
    ("post", "/api/admin/clear-cache"),
    ("get", "/api/admin/get-last-updated"),
]


class TestAdminAuth:
    """Admin endpoints require an admin caller."""

    @pytest.mark.parametrize("method,path", ADMIN_ENDPOINTS)
    def test_missing_header_is_401(self, client, method, path):
        response = getattr(client, method)(path)
        assert response.status_code == 401

    @pytest.mark.parametrize("method,path", ADMIN_ENDPOINTS)
    def test_unknown_user_is_401(self, client, method, path):
        response = getattr(client, method)(path, headers={"user-id": "nobody"})
        assert response.status_code == 401

    @pytest.mark.parametrize("method,path", ADMIN_ENDPOINTS)
    def test_non_admin_is_403(self, client, alice, method, path):
        response = getattr(client, method)(path, headers={"user-id": alice.id})
        assert response.status_code == 403

    @pytest.mark.parametrize("method,path", ADMIN_ENDPOINTS)
    def test_admin_succeeds_with_timing(self, client, admin, method, path):
        response = getattr(client, method)(path, headers={"user-id": admin.id})
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["processing_time"].endswith("s")


class TestAdminJobs:
    """Tests for admin job responses."""

    def test_recalculate_scores(self, client, test_db, admin, alice, seed_article):
        article_id = seed_article(alice, score=3)
        response = client.post(
            "/api/admin/recalculate-scores", headers={"user-id": admin.id}
        )
        data = response.json()
        assert data["processed"] == 1
        assert data["errors"] == 0
        assert data["authors_processed"] == 1
        assert data["results"][0]["new_score"] == 50
        assert test_db.get_summary(article_id).article_score == 50

    def test_recalculate_all(self, client, admin, alice, seed_article):
        seed_article(alice)
        response = client.post("/api/admin/recalculate-all", headers={"user-id": admin.id})
        data = response.json()
        assert data["articles"]["processed"] == 1
        assert data["trophies"]["processed"] == 1

    def test_rebuild_index(self, client, admin, alice, seed_article):
        seed_article(alice, tags=["python"])
        response = client.post("/api/admin/rebuild-index", headers={"user-id": admin.id})
        data = response.json()
        assert data["processed_articles"] == 1
        assert data["processed_tags"] == 1

    def test_last_updated(self, client, admin):
        response = client.get("/api/admin/get-last-updated", headers={"user-id": admin.id})
        assert response.json()["last_updated"]["trophies"] == "never"

        client.post("/api/admin/recalculate-trophies", headers={"user-id": admin.id})
        response = client.get("/api/admin/get-last-updated", headers={"user-id": admin.id})
        assert response.json()["last_updated"]["trophies"] != "never"

    def test_job_failure_is_500(self, client, admin, monkeypatch):
        def boom(self):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(RecalculationService, "sync_author_stats", boom)
        response = client.post("/api/admin/sync-author-stats", headers={"user-id": admin.id})
        assert response.status_code == 500
        assert "disk on fire" not in response.json()["detail"]
