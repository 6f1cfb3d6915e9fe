"""Tag lookup, creation and post/tag association helpers."""

from __future__ import annotations

import random
from collections.abc import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from rhinoblog.models import TAG_COLORS, Post, PostStatus, PostTag, Tag
from rhinoblog.services.errors import NotFoundError, ValidationError

__all__ = [
    "normalize_tag_name",
    "get_tag_by_name",
    "ensure_tag",
    "attach_tags",
    "replace_tags",
    "create_tag",
    "update_tag",
    "delete_tag",
    "list_tags",
    "list_posts_for_tag",
]


def normalize_tag_name(name: str) -> str:
    """Strip ``#`` and surrounding whitespace and lower-case a tag name."""
    return name.replace("#", "").strip().lower()


def get_tag_by_name(db: Session, name: str) -> Tag | None:
    """Return the tag whose name matches ``name`` case-insensitively."""
    return (
        db.query(Tag)
        .filter(func.lower(Tag.name) == name.strip().lower())
        .order_by(Tag.id)
        .first()
    )


def ensure_tag(db: Session, name: str, rng: random.Random | None = None) -> Tag:
    """Return the existing tag for ``name`` or create it with a random palette color.

    Lookup and insert happen in the same session without an intervening
    await, which keeps names unique within one process. Concurrent writers
    on a shared database need a unique index on ``lower(name)``.
    """
    normalized = normalize_tag_name(name)
    if not normalized:
        raise ValidationError("Tag name must not be empty")

    tag = get_tag_by_name(db, normalized)
    if tag is None:
        chooser = rng or random
        tag = Tag(name=normalized, color=chooser.choice(TAG_COLORS))
        db.add(tag)
        db.flush()
    return tag


def attach_tags(
    db: Session,
    post_id: int,
    tag_names: Iterable[str],
    rng: random.Random | None = None,
) -> list[Tag]:
    """Ensure every named tag exists and link it to the post once."""
    attached: list[Tag] = []
    for raw_name in tag_names:
        if not normalize_tag_name(raw_name):
            continue
        tag = ensure_tag(db, raw_name, rng=rng)
        exists = (
            db.query(PostTag)
            .filter(PostTag.post_id == post_id, PostTag.tag_id == tag.id)
            .first()
        )
        if exists is None:
            db.add(PostTag(post_id=post_id, tag_id=tag.id))
            db.flush()
        if tag not in attached:
            attached.append(tag)
    return attached


def replace_tags(db: Session, post: Post, tag_names: Iterable[str]) -> list[Tag]:
    """Set the post's tags to exactly ``tag_names``."""
    db.query(PostTag).filter(PostTag.post_id == post.id).delete(synchronize_session="fetch")
    db.flush()
    tags = attach_tags(db, post.id, tag_names)
    db.expire(post, ["tags", "tag_links"])
    return tags


def list_tags(db: Session) -> list[Tag]:
    """Return all tags ordered by name."""
    return db.query(Tag).order_by(Tag.name).all()


def create_tag(db: Session, name: str, color: str | None = None) -> Tag:
    """Create a tag explicitly; duplicates (ignoring case) are rejected."""
    normalized = normalize_tag_name(name)
    if not normalized:
        raise ValidationError("Tag name must not be empty")
    if get_tag_by_name(db, normalized) is not None:
        raise ValidationError(f"Tag '{normalized}' already exists")
    if color is not None and color not in TAG_COLORS:
        raise ValidationError(f"Invalid color; expected one of: {', '.join(TAG_COLORS)}")
    tag = Tag(name=normalized, color=color or random.choice(TAG_COLORS))
    db.add(tag)
    db.commit()
    db.refresh(tag)
    return tag


def update_tag(db: Session, tag_id: int, *, name: str | None = None, color: str | None = None) -> Tag:
    """Rename or recolor a tag."""
    tag = db.get(Tag, tag_id)
    if tag is None:
        raise NotFoundError("Tag not found")
    if name is not None:
        normalized = normalize_tag_name(name)
        if not normalized:
            raise ValidationError("Tag name must not be empty")
        clash = get_tag_by_name(db, normalized)
        if clash is not None and clash.id != tag.id:
            raise ValidationError(f"Tag '{normalized}' already exists")
        tag.name = normalized
    if color is not None:
        if color not in TAG_COLORS:
            raise ValidationError(f"Invalid color; expected one of: {', '.join(TAG_COLORS)}")
        tag.color = color
    db.commit()
    db.refresh(tag)
    return tag


def delete_tag(db: Session, tag_id: int) -> int:
    """Delete a tag after removing every post association that references it.

    Returns:
        Number of associations removed.
    """
    tag = db.get(Tag, tag_id)
    if tag is None:
        raise NotFoundError("Tag not found")

    links = db.query(PostTag).filter(PostTag.tag_id == tag_id).all()
    for link in links:
        db.expire(link.post, ["tags", "tag_links"])
        db.delete(link)
    db.flush()

    db.delete(tag)
    db.commit()
    return len(links)


def list_posts_for_tag(db: Session, name: str, limit: int = 10, offset: int = 0) -> list[Post]:
    """Return published posts carrying the tag, newest first."""
    tag = get_tag_by_name(db, normalize_tag_name(name))
    if tag is None:
        raise NotFoundError("Tag not found")
    return (
        db.query(Post)
        .join(PostTag, PostTag.post_id == Post.id)
        .filter(PostTag.tag_id == tag.id, Post.status == PostStatus.PUBLISHED)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
