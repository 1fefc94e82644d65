"""
Murmur Backend — Comment Service
==================================

What:  Create and delete comments on posts.
Who:   Called by routes/comments.py.

Rules:
    - postId and content are both required (400)
    - the post must exist (404)
    - only the comment's author may delete it (403)
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, ForbiddenError, NotFoundError, ValidationError
from app.models.comment import Comment
from app.models.post import Post
from app.schemas.comment import CommentResponse
from app.services.ids import parse_id

logger = logging.getLogger(__name__)


class CommentService:

    async def create_comment(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        post_id: Optional[str],
        content: Optional[str],
    ) -> CommentResponse:
        if not post_id or not content or not content.strip():
            raise ValidationError(message="postId and content are required")

        pid = parse_id(post_id, "post")

        try:
            result = await db.execute(select(Post.id).where(Post.id == pid))
            exists = result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            logger.error("Create comment: post lookup failed: %s", str(e), exc_info=True)
            raise DatabaseError()

        if not exists:
            raise NotFoundError(resource="post", resource_id=post_id)

        comment = Comment(content=content, user_id=user_id, post_id=pid)
        try:
            db.add(comment)
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Create comment failed: %s", str(e), exc_info=True)
            raise DatabaseError(context={"post_id": post_id})

        logger.info("Comment %s added to post %s by %s", comment.id, post_id, user_id)
        return CommentResponse.model_validate(comment)

    async def delete_comment(
        self, db: AsyncSession, comment_id: str, user_id: uuid.UUID
    ) -> CommentResponse:
        """Delete the caller's own comment and return it."""
        cid = parse_id(comment_id, "comment")

        try:
            result = await db.execute(select(Comment).where(Comment.id == cid))
            comment = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Delete comment: lookup failed: %s", str(e), exc_info=True)
            raise DatabaseError()

        if comment is None:
            raise NotFoundError(resource="comment", resource_id=comment_id)

        if comment.user_id != user_id:
            raise ForbiddenError(message="You can only delete your own comments")

        deleted = CommentResponse.model_validate(comment)
        try:
            await db.delete(comment)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Delete comment %s failed: %s", comment_id, str(e), exc_info=True)
            raise DatabaseError(context={"comment_id": comment_id})

        return deleted


comment_service = CommentService()
