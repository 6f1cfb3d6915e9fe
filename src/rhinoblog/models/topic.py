# src/rhinoblog/models/topic.py
"""SQLAlchemy models for editorial topics."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rhinoblog.db.session import Base

if TYPE_CHECKING:
    from .post import Post


class Topic(Base):
    """Curated topic; listings are ordered by ``sort_order``."""

    __tablename__ = "topics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[str] = mapped_column(Text, nullable=False, default="")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    slug: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    posts: Mapped[list[Post]] = relationship("Post", back_populates="topic")
