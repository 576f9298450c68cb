"""
API route modules.
"""

from .admin import router as admin_router
from .articles import router as articles_router
from .comments import router as comments_router
from .misc import router as misc_router
from .notifications import router as notifications_router
from .users import router as users_router

__all__ = [
    "admin_router",
    "articles_router",
    "comments_router",
    "misc_router",
    "notifications_router",
    "users_router",
]
