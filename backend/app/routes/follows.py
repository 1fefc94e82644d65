"""
Murmur Backend — Follow Route Handlers
========================================

Endpoints:
    POST   /follow            JSON {followingId} → 201
    DELETE /unfollow/{id}     stop following user {id}
"""

from fastapi import APIRouter

from app.dependencies import CurrentUserId, DbSession
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.engagement import FollowCreate
from app.services.follow_service import follow_service

router = APIRouter(tags=["Follows"])


@router.post(
    "/follow",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing id, self-follow or already following", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Follow a user",
)
async def follow_user(
    body: FollowCreate, user_id: CurrentUserId, db: DbSession
) -> MessageResponse:
    return await follow_service.follow_user(db, user_id, body.following_id)


@router.delete(
    "/unfollow/{following_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Not following this user", "model": ErrorResponse}},
    summary="Unfollow a user",
)
async def unfollow_user(
    following_id: str, user_id: CurrentUserId, db: DbSession
) -> MessageResponse:
    return await follow_service.unfollow_user(db, user_id, following_id)
