"""
Murmur Backend — Follow Service
=================================

What:  Follow and unfollow users.

Rules:
    - followingId is required (400)
    - a user cannot follow themselves (400)
    - the target user must exist (404)
    - following twice is a ConflictError (400)
    - unfollowing someone not followed is a NotFoundError (404)
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError
from app.models.engagement import Follow
from app.models.user import User
from app.schemas.common import MessageResponse
from app.services.ids import parse_id

logger = logging.getLogger(__name__)


class FollowService:

    async def _find_follow(
        self, db: AsyncSession, follower_id: uuid.UUID, following_id: uuid.UUID
    ) -> Optional[Follow]:
        result = await db.execute(
            select(Follow).where(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id,
            )
        )
        return result.scalar_one_or_none()

    async def follow_user(
        self, db: AsyncSession, follower_id: uuid.UUID, following_id: Optional[str]
    ) -> MessageResponse:
        if not following_id:
            raise ValidationError(message="followingId is required", field="followingId")

        target_id = parse_id(following_id, "user")
        if target_id == follower_id:
            raise ValidationError(message="You cannot follow yourself", field="followingId")

        try:
            result = await db.execute(select(User.id).where(User.id == target_id))
            target_exists = result.scalar_one_or_none() is not None
            existing = (
                await self._find_follow(db, follower_id, target_id) if target_exists else None
            )
        except SQLAlchemyError as e:
            logger.error("Follow user: lookup failed: %s", str(e), exc_info=True)
            raise DatabaseError()

        if not target_exists:
            raise NotFoundError(resource="user", resource_id=following_id)
        if existing is not None:
            raise ConflictError(message="You are already following this user")

        try:
            db.add(Follow(follower_id=follower_id, following_id=target_id))
            await db.flush()
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError(message="You are already following this user")
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Follow user failed: %s", str(e), exc_info=True)
            raise DatabaseError(context={"following_id": following_id})

        logger.info("User %s now follows %s", follower_id, target_id)
        return MessageResponse(message="Followed successfully")

    async def unfollow_user(
        self, db: AsyncSession, follower_id: uuid.UUID, following_id: str
    ) -> MessageResponse:
        target_id = parse_id(following_id, "follow")

        try:
            follow = await self._find_follow(db, follower_id, target_id)
        except SQLAlchemyError as e:
            logger.error("Unfollow user: lookup failed: %s", str(e), exc_info=True)
            raise DatabaseError()

        if follow is None:
            raise NotFoundError(resource="follow", resource_id=following_id)

        try:
            await db.delete(follow)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Unfollow user failed: %s", str(e), exc_info=True)
            raise DatabaseError(context={"following_id": following_id})

        logger.info("User %s unfollowed %s", follower_id, target_id)
        return MessageResponse(message="Unfollowed successfully")


follow_service = FollowService()
