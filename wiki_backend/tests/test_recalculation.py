"""
Tests for the recalculation jobs.
"""

import pytest

from wiki_backend.cache import create_cache
from wiki_backend.database.system_repository import SystemRepository
from wiki_backend.notification_service import NotificationService
from wiki_backend.services.recalculation_service import RecalculationService


@pytest.fixture
def cache():
    return create_cache(max_size=16, default_ttl=60)


@pytest.fixture
def service(test_db, cache):
    return RecalculationService(
        test_db, notifier=NotificationService(test_db), cache=cache, batch_size=2
    )


def add_reactions(db, article_id, kind, count):
    for i in range(count):
        db.articles.add_reaction(article_id, f"{kind}-fan-{i}", kind)


class TestRecalculateScores:
    """Tests for rescoring summaries from records."""

    def test_rescores_every_summary(self, test_db, service, alice, seed_article):
        ids = [seed_article(alice, title=f"A{i}", score=0) for i in range(5)]
        add_reactions(test_db, ids[0], "like", 3)

        result = service.recalculate_scores()

        assert result["processed"] == 5
        assert result["errors"] == 0
        assert test_db.get_summary(ids[0]).article_score == 53
        assert all(test_db.get_summary(i).article_score >= 50 for i in ids)

    def test_reports_old_and_new_scores(self, service, alice, seed_article):
        article_id = seed_article(alice, title="Stale", score=7)
        result = service.recalculate_scores()
        assert result["results"] == [
            {"id": article_id, "title": "Stale", "old_score": 7, "new_score": 50}
        ]

    def test_missing_record_counts_as_error(self, test_db, service, alice, seed_article):
        article_id = seed_article(alice)
        with test_db._connection.conn() as conn:
            conn.execute("DELETE FROM articles WHERE id = ?", (article_id,))

        result = service.recalculate_scores()
        assert result["processed"] == 0
        assert result["errors"] == 1

    def test_results_preview_is_bounded(self, service, alice, seed_article):
        for i in range(25):
            seed_article(alice, title=f"A{i}", content="short")
        result = service.recalculate_scores()
        assert result["processed"] == 25
        assert len(result["results"]) == 20

    def test_writes_marker_and_clears_cache(self, test_db, service, cache):
        cache.set("articles?x=1", ["cached"])
        service.recalculate_scores()
        assert test_db.system.get(SystemRepository.LAST_UPDATED) is not None
        assert cache.size == 0


class TestSyncAuthorStats:
    """Tests for author aggregation."""

    def test_aggregates_per_author(self, test_db, service, alice, bob, seed_article):
        a1 = seed_article(alice, score=60)
        seed_article(alice, score=81)
        seed_article(bob, score=40)
        add_reactions(test_db, a1, "like", 2)
        add_reactions(test_db, a1, "useful", 1)

        result = service.sync_author_stats()

        assert result["processed"] == 2
        stats = test_db.get_author_stats("alice")
        assert stats.article_count == 2
        assert stats.article_score_sum == 141
        assert stats.like_count == 2
        assert stats.useful_count == 1
        by_author = {r["author_id"]: r for r in result["results"]}
        assert by_author["alice"]["average_score"] == 70.5

    def test_article_counts_add_up(self, test_db, service, alice, bob, seed_article):
        for author, n in ((alice, 3), (bob, 2)):
            for i in range(n):
                seed_article(author, title=f"{author.id}-{i}")
        service.sync_author_stats()
        total = sum(s.article_count for s in test_db.author_stats.get_all())
        assert total == test_db.summaries.count() == 5

    def test_replaces_stale_rows(self, test_db, service, alice, bob, seed_article):
        seed_article(alice)
        article_id = seed_article(bob)
        service.sync_author_stats()

        test_db.articles.delete(article_id)
        service.sync_author_stats()

        assert test_db.get_author_stats("bob") is None
        assert test_db.get_author_stats("alice") is not None

    def test_sync_single_author(self, test_db, service, alice, seed_article):
        article_id = seed_article(alice, score=42)
        stats = service.sync_single_author("alice")
        assert stats.article_score_sum == 42

        test_db.articles.delete(article_id)
        assert service.sync_single_author("alice") is None
        assert test_db.get_author_stats("alice") is None


class TestRecalculateTrophies:
    """Tests for trophy evaluation across authors."""

    def test_awards_and_notifies_once(self, test_db, service, alice, seed_article):
        seed_article(alice, score=50)
        service.sync_author_stats()

        first = service.recalculate_trophies()
        assert first["processed"] == 1
        assert first["results"][0]["new_trophies"] == ["first-article"]
        trophies = [
            n for n in test_db.notifications.get_for_user("alice") if n.type == "trophy"
        ]
        assert len(trophies) == 1

        second = service.recalculate_trophies()
        assert second["results"][0]["new_trophies"] == []
        trophies = [
            n for n in test_db.notifications.get_for_user("alice") if n.type == "trophy"
        ]
        assert len(trophies) == 1

    def test_trophies_are_never_revoked(self, test_db, service, alice, seed_article):
        article_id = seed_article(alice)
        service.sync_author_stats()
        service.recalculate_trophies()

        test_db.articles.delete(article_id)
        service.sync_single_author("alice")
        service.evaluate_user("alice")

        assert "first-article" in test_db.get_user("alice").earned_trophies

    def test_skips_authors_without_profile(self, test_db, service, seed_article):
        class Ghost:
            id = "ghost"
            display_name = "Ghost"

        seed_article(Ghost)
        service.sync_author_stats()
        result = service.recalculate_trophies()
        assert result["processed"] == 0
        assert result["skipped"] == 1

    def test_admin_gets_admin_badge(self, test_db, service, admin, seed_article):
        seed_article(admin)
        service.sync_author_stats()
        result = service.recalculate_trophies()
        assert "admin" in result["results"][0]["new_badges"]
        assert "admin" in test_db.get_user(admin.id).available_badges

    def test_writes_marker(self, test_db, service):
        service.recalculate_trophies()
        assert test_db.system.get(SystemRepository.TROPHIES_LAST_UPDATED) is not None


class TestRebuildIndex:
    """Tests for regenerating summaries and tag counts."""

    def test_restores_summaries_and_tags(self, test_db, service, alice, seed_article):
        a1 = seed_article(alice, title="One", tags=["python", "web"])
        seed_article(alice, title="Two", tags=["python"])
        seed_article(alice, title="Three")
        test_db.summaries.delete(a1)

        result = service.rebuild_index(actor_id="admin-1")

        assert result == {"processed_articles": 3, "processed_tags": 2}
        assert test_db.get_summary(a1).title == "One"
        assert test_db.get_summary(a1).article_score == 50
        counts = {t.name: t.count for t in test_db.tags.get_all()}
        assert counts == {"python": 2, "web": 1}

    def test_hidden_flag_survives_rebuild(self, test_db, service, alice, seed_article):
        article_id = seed_article(alice)
        test_db.articles.set_hidden(article_id, "spam")
        test_db.summaries.delete(article_id)

        service.rebuild_index(actor_id="admin-1")

        assert test_db.get_summary(article_id).is_hidden is True
        assert test_db.get_summaries() == []

    def test_writes_markers(self, test_db, service):
        service.rebuild_index(actor_id="admin-1")
        marker = test_db.system.get(SystemRepository.INDEX_LAST_REBUILT)
        assert marker.actor == "admin-1"
        assert test_db.system.get(SystemRepository.OTHER_LAST_UPDATED) is not None


class TestHousekeeping:
    """Tests for recalculate_all, clear_cache and get_last_updated."""

    def test_last_updated_defaults_to_never(self, service):
        assert service.get_last_updated() == {
            "articles": "never",
            "trophies": "never",
            "other": "never",
        }

    def test_recalculate_all(self, test_db, service, alice, seed_article):
        seed_article(alice)
        result = service.recalculate_all(actor_id="admin-1")

        assert result["articles"]["processed"] == 1
        assert result["authors"]["processed"] == 1
        assert result["trophies"]["processed"] == 1
        assert test_db.system.get(SystemRepository.LAST_UPDATED).actor == "admin-1"
        last = service.get_last_updated()
        assert last["articles"] != "never"
        assert last["trophies"] != "never"

    def test_clear_cache(self, test_db, service, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        assert service.clear_cache(actor_id="admin-1") == 2
        marker = test_db.system.get(SystemRepository.CACHE_STATUS)
        assert marker.data["clear_cache"] is True
        assert marker.actor == "admin-1"
