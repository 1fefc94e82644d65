"""
Murmur Backend — Comment Schemas
==================================

What:  Request body for POST /comments and comment response shapes.

`CommentCreate` declares both fields optional so that a missing value
reaches CommentService and is reported with the same 400 message as an
empty one.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.user import UserSummary


class CommentCreate(CamelModel):
    post_id: Optional[str] = Field(default=None, description="Post being commented on")
    content: Optional[str] = Field(default=None, description="Comment text")


class CommentResponse(CamelModel):
    id: uuid.UUID
    content: str
    user_id: uuid.UUID
    post_id: uuid.UUID
    created_at: datetime


class CommentWithUser(CommentResponse):
    """Comment expanded with its author, as returned by GET /posts/{id}."""
    user: UserSummary
