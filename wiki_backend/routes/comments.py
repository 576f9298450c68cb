"""
Comment routes: threads on articles, replies and comment likes.
"""

from fastapi import APIRouter, Query

from ..auth import CurrentUser
from ..schemas import CommentResponse, CreateCommentRequest
from ..services import CommentServiceDep

router = APIRouter(tags=["comments"])


@router.get("/articles/{article_id}/comments")
async def list_comments(
    article_id: str,
    service: CommentServiceDep,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> list[CommentResponse]:
    """Top-level comments, newest first."""
    comments = service.list_comments(article_id, limit=limit, offset=offset)
    return [CommentResponse.from_db(c) for c in comments]


@router.post("/articles/{article_id}/comments")
async def add_comment(
    article_id: str,
    request: CreateCommentRequest,
    service: CommentServiceDep,
    user: CurrentUser,
) -> CommentResponse:
    comment = service.add_comment(
        article_id, author=user, content=request.content, parent_id=request.parent_id
    )
    return CommentResponse.from_db(comment)


@router.get("/comments/{comment_id}/replies")
async def list_replies(
    comment_id: str,
    service: CommentServiceDep,
    limit: int = Query(default=5, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> list[CommentResponse]:
    """Replies to a comment, oldest first."""
    replies = service.list_replies(comment_id, limit=limit, offset=offset)
    return [CommentResponse.from_db(c) for c in replies]


@router.post("/comments/{comment_id}/like")
async def like_comment(
    comment_id: str,
    service: CommentServiceDep,
    user: CurrentUser,
) -> CommentResponse:
    """Like a comment or reply. Each user may like a comment once."""
    return CommentResponse.from_db(service.like_comment(comment_id, user=user))


@router.delete("/comments/{comment_id}")
async def delete_comment(
    comment_id: str,
    service: CommentServiceDep,
    user: CurrentUser,
) -> dict:
    service.delete_comment(comment_id, actor=user)
    return {"success": True}
