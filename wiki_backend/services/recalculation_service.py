"""
Recalculation service: batch jobs that rebuild derived state.

Each job is a single sequential pass. Per-item failures are logged,
counted and skipped so one bad record never aborts a run.
"""

import logging
from collections import Counter
from datetime import datetime

from ..cache import ResponseCache
from ..config import config
from ..database import Database
from ..database.models import DBArticleSummary, DBAuthorStats
from ..database.system_repository import SystemRepository
from ..notification_service import NotificationService
from ..scoring import calculate_article_score
from ..trophies import (
    BADGES_BY_ID,
    TROPHIES_BY_ID,
    UserStats,
    calculate_user_trophies,
    find_new_ids,
    get_available_badges,
    merge_ids,
)

logger = logging.getLogger(__name__)

# Job responses only echo this many per-item results
RESULT_PREVIEW_LIMIT = 20

NEVER = "never"


class RecalculationService:
    """Batch jobs for scores, author aggregates, trophies and the summary index."""

    def __init__(
        self,
        db: Database,
        notifier: NotificationService | None = None,
        cache: ResponseCache | None = None,
        batch_size: int | None = None,
    ):
        self.db = db
        self.notifier = notifier or NotificationService(db)
        self.cache = cache
        self.batch_size = batch_size or config.RECALC_BATCH_SIZE

    # ─────────────────────────────────────────────────────────────
    # Article scores
    # ─────────────────────────────────────────────────────────────

    def recalculate_scores(self) -> dict:
        """
        Recompute every summary's score from its full record.

        Summaries whose record is missing are counted as errors and left
        untouched. Updates are committed in batches of batch_size.

        Returns:
            Dict with processed, errors and a preview of results
        """
        summaries = self.db.summaries.get_all()
        logger.info(f"Recalculating scores for {len(summaries)} articles")

        staged: list[tuple[str, int]] = []
        results = []
        processed = 0
        errors = 0

        for summary in summaries:
            try:
                record = self.db.articles.get(summary.id)
                if record is None:
                    logger.warning(f"Summary {summary.id} has no article record, skipping")
                    errors += 1
                    continue

                new_score = calculate_article_score(
                    record.content,
                    summary.like_count,
                    summary.useful_count,
                    summary.dislike_count,
                )
                staged.append((summary.id, new_score))

                if len(results) < RESULT_PREVIEW_LIMIT:
                    results.append({
                        "id": summary.id,
                        "title": summary.title or "Untitled",
                        "old_score": summary.article_score,
                        "new_score": new_score,
                    })
                processed += 1
            except Exception as e:
                logger.warning(f"Failed to rescore article {summary.id}: {e}")
                errors += 1
                continue

            if len(staged) >= self.batch_size:
                self.db.summaries.update_scores(staged)
                staged = []

        self.db.summaries.update_scores(staged)
        self.db.system.set(SystemRepository.LAST_UPDATED)
        self._invalidate_cache()

        logger.info(f"Score recalculation finished: {processed} processed, {errors} errors")
        return {"processed": processed, "errors": errors, "results": results}

    def rescore_article(self, article_id: str) -> int | None:
        """Recompute and store one article's score. Returns None if it is missing."""
        record = self.db.articles.get(article_id)
        summary = self.db.summaries.get(article_id)
        if record is None or summary is None:
            return None
        score = calculate_article_score(
            record.content,
            summary.like_count,
            summary.useful_count,
            summary.dislike_count,
        )
        self.db.summaries.update_score(article_id, score)
        return score

    # ─────────────────────────────────────────────────────────────
    # Author aggregates
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def aggregate_summaries(
        summaries: list[DBArticleSummary],
    ) -> tuple[dict[str, DBAuthorStats], int]:
        """Group summaries by author. Returns (aggregates, summaries without author)."""
        aggregates: dict[str, DBAuthorStats] = {}
        orphans = 0
        for summary in summaries:
            if not summary.author_id:
                orphans += 1
                continue
            stats = aggregates.get(summary.author_id)
            if stats is None:
                stats = DBAuthorStats(
                    author_id=summary.author_id,
                    like_count=0,
                    useful_count=0,
                    article_count=0,
                    article_score_sum=0,
                )
                aggregates[summary.author_id] = stats
            stats.like_count += summary.like_count
            stats.useful_count += summary.useful_count
            stats.article_count += 1
            stats.article_score_sum += summary.article_score
        return aggregates, orphans

    def sync_author_stats(self) -> dict:
        """
        Rebuild the author aggregate table from all summaries.

        The table is replaced wholesale, so authors without articles drop out.
        """
        summaries = self.db.summaries.get_all()
        aggregates, orphans = self.aggregate_summaries(summaries)
        if orphans:
            logger.warning(f"{orphans} summaries have no author and were not aggregated")

        self.db.author_stats.replace_all(aggregates)
        self.db.system.set(SystemRepository.AUTHOR_STATS_LAST_UPDATED)
        self._invalidate_cache()

        results = [
            {
                "author_id": stats.author_id,
                "articles": stats.article_count,
                "total_score": stats.article_score_sum,
                "average_score": round(stats.average_score, 1),
            }
            for stats in list(aggregates.values())[:RESULT_PREVIEW_LIMIT]
        ]
        logger.info(f"Author stats synchronized for {len(aggregates)} authors")
        return {"processed": len(aggregates), "errors": orphans, "results": results}

    def sync_single_author(self, author_id: str) -> DBAuthorStats | None:
        """Recompute one author's aggregate. Returns None when they have no articles."""
        summaries = self.db.summaries.get_by_author(author_id)
        aggregates, _ = self.aggregate_summaries(summaries)
        stats = aggregates.get(author_id)
        if stats is None:
            self.db.author_stats.delete(author_id)
            return None
        self.db.author_stats.upsert(stats)
        return stats

    # ─────────────────────────────────────────────────────────────
    # Trophies & badges
    # ─────────────────────────────────────────────────────────────

    def stats_for_user(self, user_id: str) -> UserStats:
        aggregate = self.db.author_stats.get(user_id)
        if aggregate is None:
            return UserStats()
        return UserStats.from_aggregate(
            like_count=aggregate.like_count,
            useful_count=aggregate.useful_count,
            article_count=aggregate.article_count,
            article_score_sum=aggregate.article_score_sum,
        )

    def evaluate_user(self, user_id: str, stats: UserStats | None = None) -> dict | None:
        """
        Evaluate trophies and badges for one user and persist the outcome.

        Earned trophies accumulate: ids stored earlier are kept even if the
        current stats no longer satisfy them. One notification is emitted
        per newly earned trophy and per newly available badge.

        Returns None if the user does not exist.
        """
        user = self.db.users.get(user_id)
        if user is None:
            return None

        stats = stats or self.stats_for_user(user_id)
        current_trophies = [t.id for t in calculate_user_trophies(stats)]
        trophy_ids = merge_ids(user.earned_trophies, current_trophies)
        badge_ids = [
            b.id for b in get_available_badges(
                stats, config.is_admin_user(user.id, user.email), earned_trophy_ids=trophy_ids
            )
        ]

        new_trophies = find_new_ids(trophy_ids, user.earned_trophies)
        new_badges = find_new_ids(badge_ids, user.available_badges)

        self.db.users.update_achievements(user_id, trophy_ids, badge_ids, stats.to_dict())

        for trophy_id in new_trophies:
            self.notifier.send_trophy_notification(
                user_id, trophy_id, TROPHIES_BY_ID[trophy_id].title
            )
        for badge_id in new_badges:
            self.notifier.send_badge_notification(
                user_id, badge_id, BADGES_BY_ID[badge_id].name
            )

        return {
            "user_id": user_id,
            "trophy_count": len(trophy_ids),
            "badge_count": len(badge_ids),
            "trophies": trophy_ids,
            "badges": badge_ids,
            "new_trophies": new_trophies,
            "new_badges": new_badges,
            "stats": {
                "article_count": stats.article_count,
                "like_count": stats.like_count,
                "useful_count": stats.useful_count,
                "average_score": round(stats.average_score, 1),
                "total_score": stats.total_score,
            },
        }

    def recalculate_trophies(self) -> dict:
        """Evaluate trophies and badges for every author with an aggregate."""
        aggregates = self.db.author_stats.get_all()
        results = []
        skipped = 0
        errors = 0

        for aggregate in aggregates:
            stats = UserStats.from_aggregate(
                like_count=aggregate.like_count,
                useful_count=aggregate.useful_count,
                article_count=aggregate.article_count,
                article_score_sum=aggregate.article_score_sum,
            )
            try:
                result = self.evaluate_user(aggregate.author_id, stats)
            except Exception as e:
                logger.warning(f"Trophy evaluation failed for user {aggregate.author_id}: {e}")
                errors += 1
                continue
            if result is None:
                skipped += 1
                continue
            results.append(result)

        self.db.system.set(SystemRepository.TROPHIES_LAST_UPDATED)
        logger.info(
            f"Trophies recalculated for {len(results)} users "
            f"({skipped} without profile, {errors} errors)"
        )
        return {
            "processed": len(results),
            "skipped": skipped,
            "errors": errors,
            "results": results,
        }

    # ─────────────────────────────────────────────────────────────
    # Summary index
    # ─────────────────────────────────────────────────────────────

    def rebuild_index(self, actor_id: str | None = None) -> dict:
        """
        Regenerate every summary from its full record and recount tags.

        Summaries and tag rows are written in batches of batch_size.
        """
        staged: list[DBArticleSummary] = []
        tag_counts: Counter[str] = Counter()
        processed_articles = 0

        for record in self.db.articles.iter_all(chunk_size=self.batch_size):
            score = calculate_article_score(
                record.content,
                record.like_count,
                record.useful_count,
                record.dislike_count,
            )
            staged.append(DBArticleSummary(
                id=record.id,
                title=record.title,
                description=record.description,
                tags=record.tags,
                author=record.author,
                author_id=record.author_id,
                image_url=record.image_url,
                like_count=record.like_count,
                useful_count=record.useful_count,
                dislike_count=record.dislike_count,
                article_score=score,
                created_at=record.created_at,
                updated_at=record.updated_at or datetime.now(),
                is_hidden=record.is_hidden,
            ))
            tag_counts.update(set(record.tags))
            processed_articles += 1

            if len(staged) >= self.batch_size:
                self.db.summaries.upsert_many(staged)
                staged = []

        self.db.summaries.upsert_many(staged)

        self.db.tags.clear()
        tag_items = sorted(tag_counts.items())
        for start in range(0, len(tag_items), self.batch_size):
            self.db.tags.insert_many(tag_items[start:start + self.batch_size])

        self.db.system.set(SystemRepository.INDEX_LAST_REBUILT, actor=actor_id)
        self.db.system.set(SystemRepository.OTHER_LAST_UPDATED)
        self._invalidate_cache()

        logger.info(
            f"Index rebuilt: {processed_articles} articles, {len(tag_items)} tags"
        )
        return {
            "processed_articles": processed_articles,
            "processed_tags": len(tag_items),
        }

    # ─────────────────────────────────────────────────────────────
    # Combined & housekeeping
    # ─────────────────────────────────────────────────────────────

    def recalculate_all(self, actor_id: str | None = None) -> dict:
        """Run scores, author aggregates and trophies in order."""
        articles = self.recalculate_scores()
        authors = self.sync_author_stats()
        trophies = self.recalculate_trophies()
        self.db.system.set(SystemRepository.LAST_UPDATED, actor=actor_id)
        return {
            "articles": articles,
            "authors": {
                "processed": authors["processed"],
                "results": authors["results"],
            },
            "trophies": {
                "processed": trophies["processed"],
                "results": trophies["results"][:RESULT_PREVIEW_LIMIT],
            },
        }

    def clear_cache(self, actor_id: str | None = None) -> int:
        """Drop cached listings and record the request. Returns entries dropped."""
        dropped = self._invalidate_cache()
        self.db.system.set(
            SystemRepository.CACHE_STATUS,
            actor=actor_id,
            data={"clear_cache": True, "entries_dropped": dropped},
        )
        logger.info(f"Response cache cleared ({dropped} entries)")
        return dropped

    def get_last_updated(self) -> dict[str, str]:
        """ISO timestamps of the last runs, or "never"."""
        markers = self.db.system.get_all()

        def fmt(key: str) -> str:
            marker = markers.get(key)
            return marker.timestamp.isoformat() if marker else NEVER

        return {
            "articles": fmt(SystemRepository.LAST_UPDATED),
            "trophies": fmt(SystemRepository.TROPHIES_LAST_UPDATED),
            "other": fmt(SystemRepository.OTHER_LAST_UPDATED),
        }

    def _invalidate_cache(self) -> int:
        if self.cache is None:
            return 0
        return self.cache.clear()
