"""
Service layer for business logic.

Services encapsulate business logic, keeping routes as thin HTTP adapters.
Each service receives its dependencies via constructor injection.

Usage in routes:
    from ..services import ArticleServiceDep

    @router.get("/articles")
    async def list_articles(service: ArticleServiceDep):
        return service.list_articles()
"""

from typing import Annotated

from fastapi import Depends

from ..config import state, get_db
from ..database import Database
from ..notification_service import NotificationService

from .article_service import ArticleService
from .comment_service import CommentService
from .recalculation_service import RecalculationService
from .user_service import UserService

__all__ = [
    # Services
    "ArticleService",
    "CommentService",
    "RecalculationService",
    "UserService",
    # Dependency factories
    "get_article_service",
    "get_comment_service",
    "get_recalculation_service",
    "get_user_service",
    # Type aliases for dependency injection
    "ArticleServiceDep",
    "CommentServiceDep",
    "RecalculationServiceDep",
    "UserServiceDep",
]


def get_article_service(db: Annotated[Database, Depends(get_db)]) -> ArticleService:
    """Dependency to get ArticleService instance."""
    return ArticleService(db=db, notifier=NotificationService(db), cache=state.cache)


def get_comment_service(db: Annotated[Database, Depends(get_db)]) -> CommentService:
    """Dependency to get CommentService instance."""
    return CommentService(db=db, notifier=NotificationService(db))


def get_recalculation_service(
    db: Annotated[Database, Depends(get_db)],
) -> RecalculationService:
    """Dependency to get RecalculationService instance."""
    return RecalculationService(db=db, notifier=NotificationService(db), cache=state.cache)


def get_user_service(db: Annotated[Database, Depends(get_db)]) -> UserService:
    """Dependency to get UserService instance."""
    return UserService(db=db, notifier=NotificationService(db), cache=state.cache)


# Re-export the service factories for convenience
ArticleServiceDep = Annotated[ArticleService, Depends(get_article_service)]
CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
RecalculationServiceDep = Annotated[RecalculationService, Depends(get_recalculation_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
