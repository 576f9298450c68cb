"""
Tests for article scoring.
"""

import pytest

from wiki_backend.scoring import (
    MARKDOWN_PATTERNS,
    calculate_article_score,
    length_score,
    markdown_constructs,
    markdown_diversity_score,
    rating_score,
)


class TestMarkdownDiversity:
    """Tests for markdown construct detection."""

    def test_empty_body_has_no_constructs(self):
        assert markdown_constructs("") == set()
        assert markdown_diversity_score("") == 0.0

    def test_detects_every_construct(self, rich_content):
        assert markdown_constructs(rich_content) == set(MARKDOWN_PATTERNS)

    def test_full_diversity_is_shared(self, rich_content):
        """Two different bodies using all constructs score the same."""
        other = (
            "## Other\n\n__strong__ _em_ [a](b) ![c](d)\n\n* item\n\n3. step\n"
        )
        assert markdown_diversity_score(rich_content) == 1.0
        assert markdown_diversity_score(other) == 1.0

    def test_image_is_not_a_link(self):
        assert markdown_constructs("![alt](pic.png)") == {"image"}

    def test_bold_is_not_italic(self):
        assert markdown_constructs("some **bold** text") == {"bold"}

    def test_heading_requires_space(self):
        assert "heading" not in markdown_constructs("#hashtag")


class TestLengthScore:
    """Tests for the length ramp."""

    def test_empty(self):
        assert length_score("") == 0.0

    def test_floor(self):
        assert length_score("x") == 0.2
        assert length_score("x" * 100) == 0.2

    def test_ceiling(self):
        assert length_score("x" * 1000) == 1.0
        assert length_score("x" * 5000) == 1.0

    def test_midpoint(self):
        assert length_score("x" * 550) == pytest.approx(0.6)


class TestRatingScore:
    """Tests for the reaction rating."""

    def test_zero(self):
        assert rating_score(0, 0, 0) == 0.0

    def test_useful_counts_double(self):
        assert rating_score(0, 1) == rating_score(2, 0)

    def test_dislikes_cannot_go_negative(self):
        assert rating_score(1, 0, 10) == 0.0

    def test_capped(self):
        assert rating_score(500, 500) == 1.0

    def test_negative_inputs_treated_as_zero(self):
        assert rating_score(-5, -5, -5) == 0.0


class TestCalculateArticleScore:
    """Tests for the combined 0-100 score."""

    def test_empty_article_scores_zero(self):
        assert calculate_article_score("", 0, 0, 0) == 0

    def test_short_plain_body(self):
        assert calculate_article_score("hello", 0, 0) == 5

    def test_rich_body_without_reactions(self, rich_content):
        assert calculate_article_score(rich_content, 0, 0) == 50

    def test_reactions(self, rich_content):
        assert calculate_article_score(rich_content, 1, 0) == 51
        assert calculate_article_score(rich_content, 0, 1) == 52
        assert calculate_article_score(rich_content, 1, 0, 1) == 50

    def test_maximum(self, rich_content):
        assert calculate_article_score(rich_content, 100, 100, 0) == 100

    @pytest.mark.parametrize("content", ["", "plain", "x" * 400])
    def test_monotonic_in_likes_and_useful(self, content):
        scores = [calculate_article_score(content, n, 0) for n in range(0, 60, 3)]
        assert scores == sorted(scores)
        scores = [calculate_article_score(content, 0, n) for n in range(0, 30, 2)]
        assert scores == sorted(scores)

    @pytest.mark.parametrize("content", ["", "plain", "x" * 400])
    def test_non_increasing_in_dislikes(self, content):
        scores = [calculate_article_score(content, 20, 5, n) for n in range(0, 20)]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.parametrize("likes,useful,dislikes", [
        (0, 0, 0), (1000, 1000, 0), (0, 0, 1000), (7, 3, 2),
    ])
    def test_always_integer_in_range(self, rich_content, likes, useful, dislikes):
        score = calculate_article_score(rich_content, likes, useful, dislikes)
        assert isinstance(score, int)
        assert 0 <= score <= 100
