# src/rhinoblog/models/vote.py
"""Models capturing voting interactions on posts and comments."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rhinoblog.db.session import Base
from rhinoblog.db.types import enum_type

if TYPE_CHECKING:
    from .comment import Comment
    from .post import Post
    from .user import User


class VoteType(str, Enum):
    """Direction of a vote."""

    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class Vote(Base):
    """Per-user vote on exactly one post or one comment.

    One vote per (user, post) and per (user, comment) is enforced by the
    voting service looking up an existing row before inserting.
    """

    __tablename__ = "votes"
    __table_args__ = (
        CheckConstraint(
            "(post_id IS NULL) <> (comment_id IS NULL)",
            name="ck_vote_single_target",
        ),
        Index("ix_votes_user_post", "user_id", "post_id"),
        Index("ix_votes_user_comment", "user_id", "comment_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    post_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=True,
    )
    comment_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
    )
    vote_type: Mapped[VoteType] = mapped_column(enum_type(VoteType), nullable=False)

    user: Mapped[User] = relationship("User", back_populates="votes")
    post: Mapped[Post | None] = relationship("Post", back_populates="votes")
    comment: Mapped[Comment | None] = relationship("Comment", back_populates="votes")
