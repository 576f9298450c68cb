"""
Authentication module for API access control.

Callers identify themselves with a `user-id` header holding the ID issued by
the identity provider. Two levels are enforced:
1. Authenticated - the header is present and names an existing user
2. Admin - additionally, the user ID is ADMIN_USER_ID and its email is ADMIN_EMAIL
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from .config import config, get_db
from .database import Database
from .database.models import DBUser

# Header carrying the caller's user ID
USER_ID_HEADER = APIKeyHeader(name="user-id", auto_error=False)


def is_admin(user: DBUser | None) -> bool:
    """Check whether a user holds admin rights."""
    return user is not None and config.is_admin_user(user.id, user.email)


def get_current_user(
    db: Annotated[Database, Depends(get_db)],
    user_id: str | None = Security(USER_ID_HEADER),
) -> DBUser:
    """
    Resolve the calling user from the `user-id` header.

    Raises:
        HTTPException: 401 if the header is missing or names no known user
    """
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user-id header",
        )

    user = db.get_user(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
        )
    return user


def require_admin(user: Annotated[DBUser, Depends(get_current_user)]) -> DBUser:
    """
    Require the calling user to be the configured admin.

    Raises:
        HTTPException: 401 as in get_current_user, 403 for non-admins
    """
    if not is_admin(user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


CurrentUser = Annotated[DBUser, Depends(get_current_user)]
AdminUser = Annotated[DBUser, Depends(require_admin)]
