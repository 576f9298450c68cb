"""
User service: profiles, badge selection and author ranking.
"""

import logging

from fastapi import HTTPException

from ..cache import ResponseCache, make_key
from ..config import config
from ..database import Database
from ..database.models import DBArticleSummary, DBAuthorStats, DBUser
from ..exceptions import require_user
from ..notification_service import NotificationService
from ..trophies import BADGES_BY_ID, get_available_badges
from .recalculation_service import RecalculationService

logger = logging.getLogger(__name__)


class UserService:
    """Service for user-related business logic."""

    def __init__(
        self,
        db: Database,
        notifier: NotificationService | None = None,
        cache: ResponseCache | None = None,
    ):
        self.db = db
        self.notifier = notifier or NotificationService(db)
        self.cache = cache
        self.recalculator = RecalculationService(db, notifier=self.notifier, cache=cache)

    def login(
        self,
        user_id: str,
        email: str | None = None,
        display_name: str | None = None,
        photo_url: str | None = None,
    ) -> tuple[DBUser, bool]:
        """
        Create the profile on first login, refresh it afterwards.

        Raises:
            HTTPException: 403 when the admin email is claimed by any ID
                other than the configured admin ID
        """
        if config.is_admin_email(email) and user_id != config.ADMIN_USER_ID:
            logger.warning(f"Rejected admin email claim from user {user_id}")
            raise HTTPException(status_code=403, detail="Email reserved for the administrator")

        user, created = self.db.users.get_or_create(
            user_id, email=email, display_name=display_name, photo_url=photo_url
        )
        if created:
            logger.info(f"Created profile for user {user_id}")
        return user, created

    def get_profile(self, user_id: str) -> tuple[DBUser, DBAuthorStats | None]:
        user = require_user(self.db.get_user(user_id))
        return user, self.db.get_author_stats(user_id)

    def update_profile(
        self,
        user_id: str,
        actor: DBUser,
        display_name: str | None = None,
        bio: str | None = None,
        photo_url: str | None = None,
    ) -> DBUser:
        require_user(self.db.get_user(user_id))
        self._require_self(user_id, actor)
        self.db.users.update_profile(
            user_id, display_name=display_name, bio=bio, photo_url=photo_url
        )
        return self.db.get_user(user_id)

    def select_badge(self, user_id: str, actor: DBUser, badge_id: str | None) -> DBUser:
        """
        Set the badge shown next to the user's name, or clear it with None.

        Raises:
            HTTPException: 403 for another user's profile, 400 when the
                badge is not currently available to the user
        """
        user = require_user(self.db.get_user(user_id))
        self._require_self(user_id, actor)

        if badge_id is not None:
            stats = self.recalculator.stats_for_user(user_id)
            available = {
                b.id for b in get_available_badges(
                    stats,
                    config.is_admin_user(user.id, user.email),
                    earned_trophy_ids=user.earned_trophies,
                )
            }
            if badge_id not in available:
                raise HTTPException(status_code=400, detail="Badge not available")

        self.db.users.set_selected_badge(user_id, badge_id)
        if badge_id is not None:
            self.notifier.send_badge_selected_notification(
                user_id, badge_id, BADGES_BY_ID[badge_id].name
            )
        return self.db.get_user(user_id)

    def get_articles(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> list[DBArticleSummary]:
        require_user(self.db.get_user(user_id))
        return self.db.get_summaries(
            author_id=user_id, sort="newest", limit=limit, offset=offset
        )

    def get_trophies(self, user_id: str) -> dict:
        """Evaluate and persist trophies for one user on demand."""
        return require_user(self.recalculator.evaluate_user(user_id))

    def get_ranking(self, limit: int = 20, offset: int = 0) -> list[DBAuthorStats]:
        key = make_key("ranking", limit=limit, offset=offset)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        ranking = self.db.author_stats.get_all(limit=limit, offset=offset)
        if self.cache is not None:
            self.cache.set(key, ranking, ttl=config.LIST_CACHE_TTL)
        return ranking

    @staticmethod
    def _require_self(user_id: str, actor: DBUser):
        if actor.id != user_id:
            raise HTTPException(status_code=403, detail="Cannot modify another user's profile")
