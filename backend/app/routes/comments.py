"""
Murmur Backend — Comment Route Handlers
=========================================

Endpoints:
    POST   /comments        JSON {postId, content}
    DELETE /comments/{id}   author only
"""

from fastapi import APIRouter

from app.dependencies import CurrentUserId, DbSession
from app.schemas.comment import CommentCreate, CommentResponse
from app.schemas.common import ErrorResponse
from app.services.comment_service import comment_service

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.post(
    "",
    response_model=CommentResponse,
    responses={
        400: {"description": "Missing postId or content", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Comment on a post",
)
async def create_comment(
    body: CommentCreate, user_id: CurrentUserId, db: DbSession
) -> CommentResponse:
    return await comment_service.create_comment(db, user_id, body.post_id, body.content)


@router.delete(
    "/{comment_id}",
    response_model=CommentResponse,
    responses={
        403: {"description": "Caller is not the author", "model": ErrorResponse},
        404: {"description": "Comment not found", "model": ErrorResponse},
    },
    summary="Delete a comment",
)
async def delete_comment(
    comment_id: str, user_id: CurrentUserId, db: DbSession
) -> CommentResponse:
    return await comment_service.delete_comment(db, comment_id, user_id)
