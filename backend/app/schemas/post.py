"""
Murmur Backend — Post Schemas
===============================

What:  Response models for the post endpoints.
Who:   Built by PostService; declared as `response_model` by routes/posts.py.

Shapes:
    PostResponse        → POST /posts (the created row)
    PostFeedItem        → GET /posts items (author, comments, likes, likedByUser)
    PostDetail          → GET /posts/{id} (comments expanded with their user)
    PostDeleteResponse  → DELETE /posts/{id}

`fileData` is the raw attachment encoded as base64, or null when the post
has no file. The binary download endpoint returns the same bytes unencoded.
"""

import base64
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.schemas.comment import CommentResponse, CommentWithUser
from app.schemas.common import CamelModel
from app.schemas.engagement import LikeResponse
from app.schemas.user import UserSummary


class PostResponse(CamelModel):
    """
    What:  A post row as stored.
    Invariant: file_data, file_name and file_type are all null or all set.
    """
    id: uuid.UUID = Field(description="Unique post identifier (UUID)")
    content: str = Field(description="Post text")
    author_id: uuid.UUID = Field(description="Author's user id")
    file_data: Optional[str] = Field(default=None, description="Attachment bytes, base64-encoded")
    file_name: Optional[str] = Field(default=None, description="Original attachment filename")
    file_type: Optional[str] = Field(default=None, description="Attachment MIME type")
    created_at: datetime = Field(description="When the post was created (UTC ISO 8601)")

    @field_validator("file_data", mode="before")
    @classmethod
    def encode_file_data(cls, v):
        """Stored bytes become base64 text; text is assumed to be encoded already."""
        if isinstance(v, (bytes, bytearray, memoryview)):
            return base64.b64encode(bytes(v)).decode("ascii")
        return v


class PostFeedItem(PostResponse):
    """
    What:  A post in the feed with its relations eagerly attached.

    liked_by_user is derived per request from `likes` and the caller's id;
    it is never stored.
    """
    author: UserSummary
    comments: List[CommentResponse] = Field(default_factory=list)
    likes: List[LikeResponse] = Field(default_factory=list)
    liked_by_user: bool = False


class PostDetail(PostResponse):
    """Single post view: like PostFeedItem, but comments carry their author."""
    author: UserSummary
    comments: List[CommentWithUser] = Field(default_factory=list)
    likes: List[LikeResponse] = Field(default_factory=list)
    liked_by_user: bool = False


class PostDeleteResponse(CamelModel):
    """
    Result of the delete transaction.

    Example:
        {"deletedComments": 3, "deletedLikes": 5, "post": {...}}
    """
    deleted_comments: int = Field(description="Comments removed with the post")
    deleted_likes: int = Field(description="Likes removed with the post")
    post: PostResponse = Field(description="The deleted post")
