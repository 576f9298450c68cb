"""
Tests for the trophy and badge catalogue.
"""

from wiki_backend.trophies import (
    ALL_BADGES,
    ALL_TROPHIES,
    UserStats,
    calculate_user_trophies,
    find_new_ids,
    get_available_badges,
    merge_ids,
)


def ids(items) -> list[str]:
    return [item.id for item in items]


class TestUserStats:
    """Tests for building stats from an author aggregate."""

    def test_average_from_aggregate(self):
        stats = UserStats.from_aggregate(
            like_count=3, useful_count=1, article_count=4, article_score_sum=300
        )
        assert stats.average_score == 75.0
        assert stats.total_score == 300

    def test_no_articles_means_zero_average(self):
        stats = UserStats.from_aggregate(0, 0, 0, 0)
        assert stats.average_score == 0.0


class TestCatalogue:
    """Sanity checks on the static catalogue."""

    def test_trophy_ids_unique(self):
        assert len(set(ids(ALL_TROPHIES))) == len(ALL_TROPHIES) == 20

    def test_levels_in_range(self):
        assert all(1 <= t.level <= 5 for t in ALL_TROPHIES)

    def test_badge_requirements_exist(self):
        trophy_ids = set(ids(ALL_TROPHIES))
        for badge in ALL_BADGES:
            if badge.trophy_requirement:
                assert badge.trophy_requirement in trophy_ids
        assert len(ALL_BADGES) == 7


class TestCalculateUserTrophies:
    """Tests for trophy predicates."""

    def test_new_user_has_none(self):
        assert calculate_user_trophies(UserStats()) == []

    def test_first_article(self):
        stats = UserStats(article_count=1)
        assert ids(calculate_user_trophies(stats)) == ["first-article"]

    def test_thresholds_are_inclusive(self):
        stats = UserStats(like_count=10, useful_count=5, article_count=5)
        earned = ids(calculate_user_trophies(stats))
        assert "first-likes" in earned
        assert "first-useful" in earned
        assert "prolific-author" in earned
        assert "expert-contributor" not in earned

    def test_quality_needs_enough_articles(self):
        assert "quality-content" not in ids(
            calculate_user_trophies(UserStats(article_count=1, average_score=99))
        )
        assert "quality-content" in ids(
            calculate_user_trophies(UserStats(article_count=2, average_score=70))
        )

    def test_wiki_master(self):
        stats = UserStats(
            like_count=75, useful_count=50, article_count=15, average_score=90
        )
        assert "wiki-master" in ids(calculate_user_trophies(stats))


class TestAvailableBadges:
    """Tests for badge gating."""

    def test_admin_badge_only_for_admins(self):
        assert ids(get_available_badges(UserStats(), is_admin=True)) == ["admin"]
        assert get_available_badges(UserStats(), is_admin=False) == []

    def test_badge_follows_trophy(self):
        stats = UserStats(article_count=10)
        assert "researcher" in ids(get_available_badges(stats, is_admin=False))

    def test_previously_earned_trophy_unlocks_badge(self):
        badges = get_available_badges(
            UserStats(), is_admin=False, earned_trophy_ids=["like-superstar"]
        )
        assert ids(badges) == ["popular"]


class TestIdDiffs:
    """Tests for id list helpers."""

    def test_find_new_ids_preserves_order(self):
        assert find_new_ids(["c", "a", "b"], ["a"]) == ["c", "b"]

    def test_merge_keeps_previous(self):
        assert merge_ids(["a", "b"], ["b", "c"]) == ["a", "b", "c"]
        assert merge_ids(["a"], []) == ["a"]
