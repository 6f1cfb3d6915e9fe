# src/rhinoblog/models/user.py
"""SQLAlchemy models for registered accounts."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rhinoblog.db.session import Base
from rhinoblog.db.time import utcnow
from rhinoblog.db.types import enum_type

if TYPE_CHECKING:
    from .comment import Comment
    from .post import Post
    from .vote import Vote


class UserRole(str, Enum):
    """Account roles, lowest privilege first."""

    USER = "user"
    CONTRIBUTOR = "contributor"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class ContributorType(str, Enum):
    """Personas a verified contributor can publish as."""

    SURGEON = "surgeon"
    PATIENT = "patient"
    INFLUENCER = "influencer"
    BLOGGER = "blogger"


ADMIN_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPERADMIN})


class User(Base):
    """Registered account.

    ``contributor_type`` is set exactly when ``role`` is contributor; the
    service layer keeps that invariant on every role change.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[UserRole] = mapped_column(
        enum_type(UserRole), nullable=False, default=UserRole.USER
    )
    contributor_type: Mapped[ContributorType | None] = mapped_column(
        enum_type(ContributorType), nullable=True
    )
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Opaque blob of social/profile links supplied by the client.
    profile_links: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    posts: Mapped[list[Post]] = relationship(
        "Post",
        back_populates="author",
        cascade="all, delete-orphan",
        foreign_keys="Post.user_id",
    )
    comments: Mapped[list[Comment]] = relationship(
        "Comment",
        back_populates="author",
        cascade="all, delete-orphan",
        foreign_keys="Comment.user_id",
    )
    votes: Mapped[list[Vote]] = relationship(
        "Vote",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def is_admin(self) -> bool:
        """Return True for admin and superadmin accounts."""
        return self.role in ADMIN_ROLES

    @property
    def is_superadmin(self) -> bool:
        """Return True for superadmin accounts."""
        return self.role == UserRole.SUPERADMIN
