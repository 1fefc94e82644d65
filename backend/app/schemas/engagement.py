"""Like and follow request/response schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel


class LikeCreate(CamelModel):
    post_id: Optional[str] = Field(default=None, description="Post to like")


class LikeResponse(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    post_id: uuid.UUID
    created_at: datetime


class FollowCreate(CamelModel):
    following_id: Optional[str] = Field(default=None, description="User to follow")
