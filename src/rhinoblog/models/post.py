# src/rhinoblog/models/post.py
"""SQLAlchemy models for posts and related attributes."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rhinoblog.db.session import Base
from rhinoblog.db.time import utcnow
from rhinoblog.db.types import enum_type

if TYPE_CHECKING:
    from .comment import Comment
    from .tag import PostTag, Tag
    from .topic import Topic
    from .user import User
    from .vote import Vote


class PostStatus(str, Enum):
    """Publication state of a post; only ``published`` reaches the public feed."""

    PENDING = "pending"
    PUBLISHED = "published"
    REJECTED = "rejected"
    FLAGGED = "flagged"


class Post(Base):
    """Primary content entity produced by users or the generation pipeline."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    # Markdown body.
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_ai_generated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    topic_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("topics.id", ondelete="SET NULL"),
        nullable=True,
    )

    status: Mapped[PostStatus] = mapped_column(
        enum_type(PostStatus), nullable=False, default=PostStatus.PENDING, index=True
    )
    # Orthogonal to status.
    is_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Denormalized; maintained by the comment service, never recomputed.
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reports: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

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

    author: Mapped[User] = relationship("User", back_populates="posts", foreign_keys=[user_id])
    topic: Mapped[Topic | None] = relationship("Topic", back_populates="posts")
    comments: Mapped[list[Comment]] = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
    )
    votes: Mapped[list[Vote]] = relationship(
        "Vote",
        back_populates="post",
        cascade="all, delete-orphan",
    )
    tag_links: Mapped[list[PostTag]] = relationship(
        "PostTag",
        back_populates="post",
        cascade="all, delete-orphan",
    )
    tags: Mapped[list[Tag]] = relationship(
        "Tag",
        secondary="post_tags",
        viewonly=True,
        order_by="Tag.name",
    )
