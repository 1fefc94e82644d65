"""
Murmur Backend — Like Service
===============================

What:  Like and unlike posts.
How:   A like is a (user, post) row. Liking twice is reported as a
       ConflictError (400); the unique constraint on likes backs this up
       when two requests race.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError
from app.models.engagement import Like
from app.models.post import Post
from app.schemas.engagement import LikeResponse
from app.services.ids import parse_id

logger = logging.getLogger(__name__)


class LikeService:

    async def _find_like(
        self, db: AsyncSession, user_id: uuid.UUID, post_id: uuid.UUID
    ) -> Optional[Like]:
        result = await db.execute(
            select(Like).where(Like.user_id == user_id, Like.post_id == post_id)
        )
        return result.scalar_one_or_none()

    async def like_post(
        self, db: AsyncSession, user_id: uuid.UUID, post_id: Optional[str]
    ) -> LikeResponse:
        """
        Record that the caller likes a post.

        Raises:
            ValidationError: postId missing
            NotFoundError: post does not exist
            ConflictError: caller already likes the post
        """
        if not post_id:
            raise ValidationError(message="postId is required", field="postId")

        pid = parse_id(post_id, "post")

        try:
            result = await db.execute(select(Post.id).where(Post.id == pid))
            post_exists = result.scalar_one_or_none() is not None
            existing = await self._find_like(db, user_id, pid) if post_exists else None
        except SQLAlchemyError as e:
            logger.error("Like post: lookup failed: %s", str(e), exc_info=True)
            raise DatabaseError()

        if not post_exists:
            raise NotFoundError(resource="post", resource_id=post_id)
        if existing is not None:
            raise ConflictError(message="You have already liked this post")

        like = Like(user_id=user_id, post_id=pid)
        try:
            db.add(like)
            await db.flush()
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError(message="You have already liked this post")
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Like post failed: %s", str(e), exc_info=True)
            raise DatabaseError(context={"post_id": post_id})

        return LikeResponse.model_validate(like)

    async def unlike_post(
        self, db: AsyncSession, user_id: uuid.UUID, post_id: str
    ) -> LikeResponse:
        """Remove the caller's like from a post (`post_id` comes from the path)."""
        pid = parse_id(post_id, "like")

        try:
            like = await self._find_like(db, user_id, pid)
        except SQLAlchemyError as e:
            logger.error("Unlike post: lookup failed: %s", str(e), exc_info=True)
            raise DatabaseError()

        if like is None:
            raise NotFoundError(resource="like", resource_id=post_id)

        removed = LikeResponse.model_validate(like)
        try:
            await db.delete(like)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Unlike post %s failed: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(context={"post_id": post_id})

        return removed


like_service = LikeService()
