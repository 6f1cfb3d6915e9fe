# src/rhinoblog/models/comment.py
"""SQLAlchemy models for comments on posts."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rhinoblog.db.session import Base
from rhinoblog.db.time import utcnow
from rhinoblog.db.types import enum_type

if TYPE_CHECKING:
    from .post import Post
    from .user import User
    from .vote import Vote


class CommentStatus(str, Enum):
    """Moderation state of a comment. Comments start out published."""

    PUBLISHED = "published"
    REJECTED = "rejected"
    FLAGGED = "flagged"


class Comment(Base):
    """Comment on a post; ``parent_id`` links a reply to another comment."""

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # Top-level comments have parent_id = NULL.
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
    )
    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[CommentStatus] = mapped_column(
        enum_type(CommentStatus), nullable=False, default=CommentStatus.PUBLISHED
    )
    moderation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    moderated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    moderated_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    post: Mapped[Post] = relationship("Post", back_populates="comments")
    author: Mapped[User] = relationship("User", back_populates="comments", foreign_keys=[user_id])
    votes: Mapped[list[Vote]] = relationship(
        "Vote",
        back_populates="comment",
        cascade="all, delete-orphan",
    )
