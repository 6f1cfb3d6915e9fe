# src/rhinoblog/models/tag.py
"""SQLAlchemy models for tags and the post/tag join table."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rhinoblog.db.session import Base

if TYPE_CHECKING:
    from .post import Post

TAG_COLORS = (
    "blue",
    "green",
    "red",
    "yellow",
    "purple",
    "pink",
    "indigo",
    "gray",
    "orange",
)


class Tag(Base):
    """Free-form label; names are unique case-insensitively by lookup."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    color: Mapped[str] = mapped_column(Text, nullable=False, default="blue")

    post_links: Mapped[list[PostTag]] = relationship(
        "PostTag",
        back_populates="tag",
        cascade="all, delete-orphan",
    )


class PostTag(Base):
    """Association row between a post and a tag."""

    __tablename__ = "post_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tag_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    post: Mapped[Post] = relationship("Post", back_populates="tag_links")
    tag: Mapped[Tag] = relationship("Tag", back_populates="post_links")
