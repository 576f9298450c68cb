"""
Article scoring.

An article's score (0-100) combines three independent components:

- markdown diversity (25 points): how many of seven markdown constructs
  the body uses at least once
- length (25 points): a linear ramp from a 0.2 floor at 100 characters
  to 1.0 at 1000 characters
- rating (50 points): likes, useful marks and dislikes combined into a
  raw rating clamped to [0, 50]
"""

import math
import re

DIVERSITY_WEIGHT = 25
LENGTH_WEIGHT = 25
RATING_WEIGHT = 5  # applied to the 0-10 rescaled rating

LENGTH_FLOOR_CHARS = 100
LENGTH_CEILING_CHARS = 1000
LENGTH_FLOOR_SCORE = 0.2

RATING_CAP = 50
RATING_SCALE = 10

MARKDOWN_PATTERNS: dict[str, re.Pattern] = {
    "heading": re.compile(r"^#{1,6} +\S", re.MULTILINE),
    "link": re.compile(r"(?<!!)\[[^\]\n]*\]\([^)\n]+\)"),
    "image": re.compile(r"!\[[^\]\n]*\]\([^)\n]+\)"),
    "list": re.compile(r"^[ \t]*[-*+] +\S", re.MULTILINE),
    "ordered_list": re.compile(r"^[ \t]*\d+\. +\S", re.MULTILINE),
    "bold": re.compile(r"(\*\*|__)(?=\S)(.+?)(?<=\S)\1"),
    "italic": re.compile(
        r"(?<![*\w])\*(?![*\s])(.+?)(?<![*\s])\*(?![*\w])"
        r"|(?<![_\w])_(?![_\s])(.+?)(?<![_\s])_(?![_\w])"
    ),
}


def _non_negative(value: int | None) -> int:
    return max(0, int(value or 0))


def markdown_constructs(content: str) -> set[str]:
    """Return the names of the markdown constructs present in content."""
    if not content:
        return set()
    return {name for name, pattern in MARKDOWN_PATTERNS.items() if pattern.search(content)}


def markdown_diversity_score(content: str) -> float:
    """Fraction of known markdown constructs used at least once."""
    return len(markdown_constructs(content)) / len(MARKDOWN_PATTERNS)


def length_score(content: str) -> float:
    """Piecewise-linear length score in [0, 1]."""
    length = len(content or "")
    if length == 0:
        return 0.0
    if length <= LENGTH_FLOOR_CHARS:
        return LENGTH_FLOOR_SCORE
    if length >= LENGTH_CEILING_CHARS:
        return 1.0
    span = LENGTH_CEILING_CHARS - LENGTH_FLOOR_CHARS
    return LENGTH_FLOOR_SCORE + (1.0 - LENGTH_FLOOR_SCORE) * (length - LENGTH_FLOOR_CHARS) / span


def rating_score(like_count: int, useful_count: int, dislike_count: int = 0) -> float:
    """Rating normalized to [0, 1]."""
    raw = (
        _non_negative(like_count)
        + 2 * _non_negative(useful_count)
        - 3 * _non_negative(dislike_count)
    )
    return min(max(raw, 0), RATING_CAP) / RATING_CAP


def calculate_article_score(
    content: str,
    like_count: int,
    useful_count: int,
    dislike_count: int = 0,
) -> int:
    """
    Score an article on a 0-100 scale.

    Args:
        content: Markdown body (may be empty)
        like_count: Number of likes
        useful_count: Number of "useful" marks
        dislike_count: Number of dislikes

    Returns:
        Integer score between 0 and 100
    """
    total = (
        DIVERSITY_WEIGHT * markdown_diversity_score(content)
        + LENGTH_WEIGHT * length_score(content)
        + RATING_WEIGHT * RATING_SCALE * rating_score(like_count, useful_count, dislike_count)
    )
    # Round half up; float noise must not push an exact .5 either way
    score = math.floor(round(total, 9) + 0.5)
    return min(max(score, 0), 100)
