"""Public user representation embedded in posts and comments."""

import uuid
from datetime import datetime
from typing import Optional

from app.schemas.common import CamelModel


class UserSummary(CamelModel):
    id: uuid.UUID
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    created_at: datetime
