"""
Murmur Backend — Post SQLAlchemy Model
========================================

What:  ORM model representing the `posts` table.
Who:   Used by PostService for create/list/read/delete and by Alembic.

Table Design:
    - UUID primary key generated by the application
    - content: TEXT, required
    - author_id: FK to users, required
    - file_data / file_name / file_type: optional attachment kept in the row.
      The three columns are either all NULL or all set; a CHECK constraint
      enforces it at the database level.
    - created_at: UTC, set at insert; the list endpoint orders by it DESC

Relations:
    author   → User (many-to-one)
    comments → Comment (one-to-many)
    likes    → Like (one-to-many)

    Deleting a post is done by PostService in one transaction that removes
    comments and likes first. No ORM cascade is configured on these
    relationships so that the service owns the delete order.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    LargeBinary,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.comment import Comment
    from app.models.engagement import Like
    from app.models.user import User


class Post(Base):
    """
    A content item created by a user, optionally carrying one file attachment.

    Query Patterns:
        - Feed: SELECT ... ORDER BY created_at DESC
          → idx_posts_created_at
        - Single post: SELECT ... WHERE id = :uuid
          → primary key
        - Download: SELECT file_data, file_name, file_type WHERE id = :uuid
    """

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # ── Attachment ────────────────────────────────────────────────────────
    # Raw bytes of the uploaded file, its original filename and MIME type
    file_data: Mapped[Optional[bytes]] = mapped_column(LargeBinary, nullable=True)
    file_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    file_type: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    author: Mapped["User"] = relationship(back_populates="posts")
    comments: Mapped[List["Comment"]] = relationship(
        back_populates="post", order_by="Comment.created_at"
    )
    likes: Mapped[List["Like"]] = relationship(back_populates="post")

    __table_args__ = (
        Index("idx_posts_created_at", created_at.desc()),
        CheckConstraint(
            "(file_data IS NULL AND file_name IS NULL AND file_type IS NULL) OR "
            "(file_data IS NOT NULL AND file_name IS NOT NULL AND file_type IS NOT NULL)",
            name="ck_posts_file_fields_together",
        ),
    )

    @property
    def has_file(self) -> bool:
        return self.file_data is not None

    def __repr__(self) -> str:
        return (
            f"<Post(id={self.id}, author_id={self.author_id}, "
            f"has_file={self.has_file})>"
        )
