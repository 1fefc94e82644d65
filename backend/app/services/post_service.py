"""
Murmur Backend — Post Service (Business Logic)
================================================

What:  Create, list, read, download and delete posts.
How:   Each operation is one query (or one fixed transaction) against the
       async session; results are returned as Pydantic response models.
Who:   Called by routes/posts.py; receives the request's AsyncSession.

Eager loading:
    Post relations are fetched with `selectinload`: one query for the posts
    plus one per relation (author, comments, comment authors, likes)
    regardless of how many posts are returned.

Delete transaction:
    ┌────────────┐   ┌──────────────┐   ┌────────────┐   ┌──────────┐
    │ load post  │──▶│ delete       │──▶│ delete     │──▶│ delete   │──▶ COMMIT
    │ 404 / 403  │   │ comments     │   │ likes      │   │ post     │
    └────────────┘   └──────────────┘   └────────────┘   └──────────┘
    Any failure after the checks rolls back all three deletes.

Error Handling Strategy:
    Business-rule failures raise ValidationError / NotFoundError /
    ForbiddenError. SQLAlchemy errors are logged with the operation name and
    re-raised as DatabaseError, which the global handler turns into a
    generic 500.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Iterable, List, Optional

from sqlalchemy import delete, desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import (
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from app.models.comment import Comment
from app.models.engagement import Like
from app.models.post import Post
from app.schemas.post import (
    PostDeleteResponse,
    PostDetail,
    PostFeedItem,
    PostResponse,
)
from app.services.ids import parse_id
from app.services.upload_service import UploadedFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostAttachment:
    """Stored attachment of a post, as returned by the download endpoint."""

    data: bytes
    filename: str
    content_type: str


def is_liked_by(likes: Iterable[Like], user_id: uuid.UUID) -> bool:
    """True iff `user_id` appears among the given likes."""
    return any(like.user_id == user_id for like in likes)


class PostService:
    """
    Business logic layer for post operations.

    Responsibilities:
        - create_post(): validate content, persist post with optional file
        - list_posts(): every post, newest first, with relations and likedByUser
        - get_post(): one post with comment authors and likedByUser
        - get_post_file(): stored attachment for download
        - delete_post(): ownership check + atomic cascade delete
    """

    async def create_post(
        self,
        db: AsyncSession,
        author_id: uuid.UUID,
        content: Optional[str],
        upload: Optional[UploadedFile] = None,
    ) -> PostResponse:
        """
        Persist a new post authored by the caller.

        The three file columns are filled from `upload` or all left NULL.

        Raises:
            ValidationError: content missing or blank (nothing is persisted)
            DatabaseError: insert failed
        """
        if not content or not content.strip():
            raise ValidationError(message="Content is required", field="content")

        post = Post(
            content=content,
            author_id=author_id,
            file_data=upload.buffer if upload else None,
            file_name=upload.original_name if upload else None,
            file_type=upload.mime_type if upload else None,
        )

        try:
            db.add(post)
            await db.flush()  # Assigns id and created_at
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Create post failed: %s", str(e), exc_info=True)
            raise DatabaseError(context={"author_id": str(author_id)})

        logger.info(
            "Post %s created by %s (file=%s)",
            post.id,
            author_id,
            upload.original_name if upload else None,
        )
        return PostResponse.model_validate(post)

    async def list_posts(
        self, db: AsyncSession, user_id: uuid.UUID
    ) -> List[PostFeedItem]:
        """
        Return all posts, most recent first.

        `user_id` only drives the likedByUser flag; it does not filter
        which posts are visible.
        """
        query = (
            select(Post)
            .options(
                selectinload(Post.author),
                selectinload(Post.comments),
                selectinload(Post.likes),
            )
            .order_by(desc(Post.created_at))
        )

        try:
            result = await db.execute(query)
            posts = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("List posts failed: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not retrieve posts")

        return [
            PostFeedItem.model_validate(post).model_copy(
                update={"liked_by_user": is_liked_by(post.likes, user_id)}
            )
            for post in posts
        ]

    async def get_post(
        self, db: AsyncSession, post_id: str, user_id: uuid.UUID
    ) -> PostDetail:
        """
        Return one post with author, likes and comments (each with its user).

        Raises:
            NotFoundError: unknown or malformed id
            DatabaseError: query failed
        """
        pid = parse_id(post_id, "post")
        query = (
            select(Post)
            .where(Post.id == pid)
            .options(
                selectinload(Post.author),
                selectinload(Post.likes),
                selectinload(Post.comments).selectinload(Comment.user),
            )
        )

        try:
            result = await db.execute(query)
            post = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Get post %s failed: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(message="Could not retrieve the post")

        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id)

        return PostDetail.model_validate(post).model_copy(
            update={"liked_by_user": is_liked_by(post.likes, user_id)}
        )

    async def get_post_file(self, db: AsyncSession, post_id: str) -> PostAttachment:
        """
        Load only the attachment columns of a post.

        Raises:
            NotFoundError: post missing, malformed id, or post without a file
        """
        pid = parse_id(post_id, "file")

        try:
            result = await db.execute(
                select(Post.file_data, Post.file_name, Post.file_type).where(Post.id == pid)
            )
            row = result.one_or_none()
        except SQLAlchemyError as e:
            logger.error("Download file for post %s failed: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(message="Could not download the file")

        if row is None or row.file_data is None:
            raise NotFoundError(resource="file", resource_id=post_id)

        return PostAttachment(
            data=row.file_data,
            filename=row.file_name,
            content_type=row.file_type,
        )

    async def delete_post(
        self, db: AsyncSession, post_id: str, user_id: uuid.UUID
    ) -> PostDeleteResponse:
        """
        Delete a post with all of its comments and likes.

        Order of checks: existence (404) before ownership (403), so an
        unknown id never reveals an authorization error.

        Raises:
            NotFoundError: no such post
            ForbiddenError: caller is not the author
            DatabaseError: a delete failed; nothing was removed
        """
        pid = parse_id(post_id, "post")

        try:
            result = await db.execute(select(Post).where(Post.id == pid))
            post = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Delete post %s: lookup failed: %s", post_id, str(e), exc_info=True)
            raise DatabaseError()

        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id)

        if post.author_id != user_id:
            raise ForbiddenError(
                message="You can only delete your own posts",
                context={"post_id": post_id, "user_id": str(user_id)},
            )

        deleted = PostResponse.model_validate(post)

        try:
            comments_result = await db.execute(delete(Comment).where(Comment.post_id == pid))
            likes_result = await db.execute(delete(Like).where(Like.post_id == pid))
            await db.execute(delete(Post).where(Post.id == pid))
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Delete post %s failed: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(context={"post_id": post_id})

        logger.info(
            "Post %s deleted by %s (%d comments, %d likes)",
            post_id,
            user_id,
            comments_result.rowcount,
            likes_result.rowcount,
        )
        return PostDeleteResponse(
            deleted_comments=comments_result.rowcount,
            deleted_likes=likes_result.rowcount,
            post=deleted,
        )


# ── Singleton Instance ────────────────────────────────────────────────────
post_service = PostService()
