"""
Murmur Backend — ORM Models
=============================

Importing this package registers every table with `Base.metadata`
(used by Alembic autogenerate and by the test suite's create_all).
"""

from app.models.user import User
from app.models.post import Post
from app.models.comment import Comment
from app.models.engagement import Follow, Like

__all__ = ["User", "Post", "Comment", "Follow", "Like"]
