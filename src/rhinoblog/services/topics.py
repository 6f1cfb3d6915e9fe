"""Editorial topic management."""

from __future__ import annotations

import re
from typing import Any

from sqlalchemy.orm import Session

from rhinoblog.models import Post, PostStatus, Topic
from rhinoblog.services.errors import NotFoundError, ValidationError

__all__ = [
    "slugify",
    "list_topics",
    "get_topic_by_slug",
    "list_topic_posts",
    "create_topic",
    "update_topic",
    "delete_topic",
]

_TOPIC_FIELDS = ("name", "icon", "description", "slug", "sort_order")
_NULLABLE_TOPIC_FIELDS = frozenset({"description"})


def slugify(value: str) -> str:
    """Lower-case ``value`` and join its alphanumeric runs with hyphens."""
    return "-".join(re.findall(r"[a-z0-9]+", value.lower()))


def list_topics(db: Session) -> list[Topic]:
    return db.query(Topic).order_by(Topic.sort_order, Topic.id).all()


def get_topic_by_slug(db: Session, slug: str) -> Topic:
    topic = db.query(Topic).filter(Topic.slug == slug).first()
    if topic is None:
        raise NotFoundError("Topic not found")
    return topic


def list_topic_posts(db: Session, slug: str, limit: int = 10, offset: int = 0) -> list[Post]:
    """Published posts of a topic, pinned first then newest."""
    topic = get_topic_by_slug(db, slug)
    return (
        db.query(Post)
        .filter(Post.topic_id == topic.id, Post.status == PostStatus.PUBLISHED)
        .order_by(Post.is_pinned.desc(), Post.created_at.desc(), Post.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def _check_slug(db: Session, slug: str, topic_id: int | None = None) -> str:
    if not slug:
        raise ValidationError("Topic slug must not be empty")
    clash = db.query(Topic).filter(Topic.slug == slug).first()
    if clash is not None and clash.id != topic_id:
        raise ValidationError(f"Topic slug '{slug}' already exists")
    return slug


def create_topic(
    db: Session,
    *,
    name: str,
    icon: str = "",
    description: str | None = None,
    slug: str | None = None,
    sort_order: int = 0,
) -> Topic:
    """Create a topic; the slug defaults to one derived from ``name``."""
    topic = Topic(
        name=name,
        icon=icon,
        description=description,
        slug=_check_slug(db, slug or slugify(name)),
        sort_order=sort_order,
    )
    db.add(topic)
    db.commit()
    db.refresh(topic)
    return topic


def update_topic(db: Session, topic_id: int, changes: dict[str, Any]) -> Topic:
    topic = db.get(Topic, topic_id)
    if topic is None:
        raise NotFoundError("Topic not found")
    if changes.get("slug") is not None:
        _check_slug(db, changes["slug"], topic_id=topic.id)
    for key in _TOPIC_FIELDS:
        if key not in changes:
            continue
        if changes[key] is None and key not in _NULLABLE_TOPIC_FIELDS:
            continue
        setattr(topic, key, changes[key])
    db.commit()
    db.refresh(topic)
    return topic


def delete_topic(db: Session, topic_id: int) -> None:
    """Delete a topic; its posts are kept and detached."""
    topic = db.get(Topic, topic_id)
    if topic is None:
        raise NotFoundError("Topic not found")
    db.query(Post).filter(Post.topic_id == topic_id).update(
        {Post.topic_id: None}, synchronize_session="fetch"
    )
    db.delete(topic)
    db.commit()
