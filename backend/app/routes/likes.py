"""
Murmur Backend — Like Route Handlers
======================================

Endpoints:
    POST   /likes             JSON {postId}
    DELETE /likes/{postId}    removes the caller's like from that post
"""

from fastapi import APIRouter

from app.dependencies import CurrentUserId, DbSession
from app.schemas.common import ErrorResponse
from app.schemas.engagement import LikeCreate, LikeResponse
from app.services.like_service import like_service

router = APIRouter(prefix="/likes", tags=["Likes"])


@router.post(
    "",
    response_model=LikeResponse,
    responses={
        400: {"description": "Missing postId or already liked", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Like a post",
)
async def like_post(body: LikeCreate, user_id: CurrentUserId, db: DbSession) -> LikeResponse:
    return await like_service.like_post(db, user_id, body.post_id)


@router.delete(
    "/{post_id}",
    response_model=LikeResponse,
    responses={404: {"description": "Like not found", "model": ErrorResponse}},
    summary="Unlike a post",
)
async def unlike_post(post_id: str, user_id: CurrentUserId, db: DbSession) -> LikeResponse:
    return await like_service.unlike_post(db, user_id, post_id)
