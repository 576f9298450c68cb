"""
Trophy and badge catalogue.

Trophies are static predicates over an author's aggregate stats. Badges are
display identifiers a user can select; most require a specific trophy and
one requires admin status.
"""

from dataclasses import asdict, dataclass
from typing import Callable


@dataclass(frozen=True)
class UserStats:
    """Aggregate stats used for trophy evaluation."""
    like_count: int = 0
    useful_count: int = 0
    article_count: int = 0
    average_score: float = 0.0  # mean article score, 0-100
    total_score: int = 0

    @classmethod
    def from_aggregate(
        cls,
        like_count: int,
        useful_count: int,
        article_count: int,
        article_score_sum: int,
    ) -> "UserStats":
        average = article_score_sum / article_count if article_count > 0 else 0.0
        return cls(
            like_count=like_count or 0,
            useful_count=useful_count or 0,
            article_count=article_count or 0,
            average_score=average,
            total_score=article_score_sum or 0,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Trophy:
    id: str
    title: str
    description: str
    level: int
    condition: Callable[[UserStats], bool]


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    description: str
    requires_admin: bool = False
    trophy_requirement: str | None = None


ALL_TROPHIES: list[Trophy] = [
    # Article count
    Trophy("first-article", "First Step", "Published a first article", 1,
           lambda s: s.article_count >= 1),
    Trophy("prolific-author", "Prolific Author", "Published 5 or more articles", 2,
           lambda s: s.article_count >= 5),
    Trophy("expert-contributor", "Expert Contributor", "Published 10 or more articles", 3,
           lambda s: s.article_count >= 10),
    Trophy("authority", "Authority", "Published 20 or more articles", 4,
           lambda s: s.article_count >= 20),

    # Likes
    Trophy("first-likes", "First Likes", "Received 10 likes in total", 1,
           lambda s: s.like_count >= 10),
    Trophy("popular-author", "Popular Author", "Received 50 likes in total", 2,
           lambda s: s.like_count >= 50),
    Trophy("like-superstar", "Like Superstar", "Received 100 likes in total", 3,
           lambda s: s.like_count >= 100),
    Trophy("like-legend", "Like Legend", "Received 200 likes in total", 4,
           lambda s: s.like_count >= 200),

    # Useful marks
    Trophy("first-useful", "First Useful", "Marked useful 5 times in total", 1,
           lambda s: s.useful_count >= 5),
    Trophy("helpful-author", "Helpful Author", "Marked useful 25 times in total", 2,
           lambda s: s.useful_count >= 25),
    Trophy("useful-superstar", "Useful Superstar", "Marked useful 50 times in total", 3,
           lambda s: s.useful_count >= 50),
    Trophy("useful-legend", "Useful Legend", "Marked useful 100 times in total", 4,
           lambda s: s.useful_count >= 100),

    # Quality (average article score)
    Trophy("quality-content", "Quality Content", "Average article score of 70 or more", 1,
           lambda s: s.average_score >= 70 and s.article_count >= 2),
    Trophy("high-quality", "High Quality", "Average article score of 80 or more", 2,
           lambda s: s.average_score >= 80 and s.article_count >= 3),
    Trophy("quality-expert", "Quality Expert", "Average article score of 90 or more", 3,
           lambda s: s.average_score >= 90 and s.article_count >= 5),
    Trophy("quality-legend", "Quality Legend", "Average article score of 96 or more", 4,
           lambda s: s.average_score >= 96 and s.article_count >= 5),

    # Combined
    Trophy("rising-star", "Rising Star", "Strong scores across several liked articles", 2,
           lambda s: s.average_score >= 80 and s.article_count >= 3 and s.like_count >= 15),
    Trophy("tech-guru", "Tech Guru", "Articles, likes and useful marks all above the bar", 3,
           lambda s: s.article_count >= 7 and s.like_count >= 30 and s.useful_count >= 20),
    Trophy("community-pillar", "Community Pillar", "Many well-rated articles", 4,
           lambda s: (s.article_count >= 10 and s.like_count >= 50
                      and s.useful_count >= 40 and s.average_score >= 80)),
    Trophy("wiki-master", "Wiki Master", "Outstanding contributor on every axis", 5,
           lambda s: (s.article_count >= 15 and s.like_count >= 75
                      and s.useful_count >= 50 and s.average_score >= 90)),
]

TROPHIES_BY_ID: dict[str, Trophy] = {t.id: t for t in ALL_TROPHIES}


ALL_BADGES: list[Badge] = [
    Badge("admin", "Administrator", "Site administrator", requires_admin=True),
    Badge("expert", "Expert", "Holder of the Quality Expert trophy",
          trophy_requirement="quality-expert"),
    Badge("helpful", "Helpful", "Holder of the Useful Superstar trophy",
          trophy_requirement="useful-superstar"),
    Badge("popular", "Popular", "Holder of the Like Superstar trophy",
          trophy_requirement="like-superstar"),
    Badge("researcher", "Researcher", "Holder of the Expert Contributor trophy",
          trophy_requirement="expert-contributor"),
    Badge("guru", "Guru", "Holder of the Tech Guru trophy",
          trophy_requirement="tech-guru"),
    Badge("master", "Master", "Holder of the Wiki Master trophy",
          trophy_requirement="wiki-master"),
]

BADGES_BY_ID: dict[str, Badge] = {b.id: b for b in ALL_BADGES}


def calculate_user_trophies(stats: UserStats) -> list[Trophy]:
    """Return the trophies earned for the given stats, in catalogue order."""
    return [trophy for trophy in ALL_TROPHIES if trophy.condition(stats)]


def get_available_badges(
    stats: UserStats,
    is_admin: bool,
    earned_trophy_ids: list[str] | None = None,
) -> list[Badge]:
    """
    Return the badges a user may select.

    earned_trophy_ids extends the trophies computed from stats, so a trophy
    kept from an earlier evaluation still unlocks its badge.
    """
    earned = {t.id for t in calculate_user_trophies(stats)}
    if earned_trophy_ids:
        earned.update(earned_trophy_ids)

    available = []
    for badge in ALL_BADGES:
        if badge.requires_admin:
            if is_admin:
                available.append(badge)
        elif badge.trophy_requirement:
            if badge.trophy_requirement in earned:
                available.append(badge)
        else:
            available.append(badge)
    return available


def find_new_ids(current_ids: list[str], previous_ids: list[str]) -> list[str]:
    """Ids in current_ids that were not in previous_ids, order preserved."""
    previous = set(previous_ids)
    return [i for i in current_ids if i not in previous]


def merge_ids(previous_ids: list[str], current_ids: list[str]) -> list[str]:
    """Union of both lists: previous order first, then newly added ids."""
    return list(previous_ids) + find_new_ids(current_ids, previous_ids)
