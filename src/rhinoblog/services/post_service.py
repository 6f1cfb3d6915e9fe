"""Service-level helpers for creating, editing and listing posts."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from rhinoblog.models import Post, PostStatus, PostTag, Tag, Topic, User
from rhinoblog.services.errors import NotFoundError, PermissionDeniedError, ValidationError
from rhinoblog.services.permissions import can_modify_post, can_view_post
from rhinoblog.services.tagging import attach_tags, normalize_tag_name, replace_tags
from rhinoblog.services.trust import initial_post_status

logger = logging.getLogger(__name__)

__all__ = [
    "create_post",
    "update_post",
    "delete_post",
    "get_visible_post",
    "list_feed",
    "list_user_posts",
]

_EDITABLE_FIELDS = ("title", "content", "image_url", "topic_id")


def _require_topic(db: Session, topic_id: int | None) -> None:
    if topic_id is not None and db.get(Topic, topic_id) is None:
        raise ValidationError("Topic not found")


def create_post(
    db: Session,
    *,
    author: User,
    title: str,
    content: str,
    image_url: str | None = None,
    topic_id: int | None = None,
    tags: Iterable[str] = (),
    status: PostStatus | None = None,
    is_ai_generated: bool = False,
) -> Post:
    """Persist a post and attach its tags.

    Args:
        db: Database session.
        author: Owner of the post.
        title: Post title.
        content: Markdown body.
        image_url: Optional header image.
        topic_id: Optional topic the post belongs to.
        tags: Tag names; created on demand.
        status: Explicit status; when omitted the author's publishing gate decides.
        is_ai_generated: Marks content produced by the generation pipeline.

    Returns:
        The stored post with tags loaded.
    """
    _require_topic(db, topic_id)
    post = Post(
        user_id=author.id,
        title=title,
        content=content,
        image_url=image_url,
        topic_id=topic_id,
        is_ai_generated=is_ai_generated,
        status=status if status is not None else initial_post_status(db, author),
    )
    db.add(post)
    db.flush()
    attach_tags(db, post.id, tags)
    db.commit()
    db.refresh(post)
    if post.status == PostStatus.PENDING:
        logger.info("Post %s by user %s held for review", post.id, author.id)
    return post


def update_post(
    db: Session,
    post_id: int,
    actor: User,
    changes: dict[str, object],
    tags: Iterable[str] | None = None,
) -> Post:
    """Apply a partial update; only the owner or an admin may edit.

    The post's status is not changed by an edit.
    """
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    if not can_modify_post(actor, post):
        raise PermissionDeniedError("Not authorized to update this post")

    if "topic_id" in changes:
        _require_topic(db, changes["topic_id"])  # type: ignore[arg-type]
    for key in _EDITABLE_FIELDS:
        if key in changes:
            setattr(post, key, changes[key])
    if tags is not None:
        replace_tags(db, post, tags)

    db.commit()
    db.refresh(post)
    return post


def delete_post(db: Session, post_id: int, actor: User) -> None:
    """Delete a post together with its comments, votes and tag links."""
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    if not can_modify_post(actor, post):
        raise PermissionDeniedError("Not authorized to delete this post")
    db.delete(post)
    db.commit()


def get_visible_post(db: Session, post_id: int, viewer: User | None) -> Post:
    """Return a post if ``viewer`` may read it, else raise NotFoundError."""
    post = db.get(Post, post_id)
    if post is None or not can_view_post(viewer, post):
        raise NotFoundError("Post not found")
    return post


def list_feed(
    db: Session,
    *,
    limit: int = 10,
    offset: int = 0,
    tag: str | None = None,
    topic_slug: str | None = None,
) -> Sequence[Post]:
    """Return published posts, pinned first, then newest first."""
    query = db.query(Post).filter(Post.status == PostStatus.PUBLISHED)
    if tag:
        query = (
            query.join(PostTag, PostTag.post_id == Post.id)
            .join(Tag, Tag.id == PostTag.tag_id)
            .filter(Tag.name == normalize_tag_name(tag))
        )
    if topic_slug:
        query = query.join(Topic, Topic.id == Post.topic_id).filter(Topic.slug == topic_slug)
    return (
        query.order_by(Post.is_pinned.desc(), Post.created_at.desc(), Post.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def list_user_posts(db: Session, user_id: int, *, include_hidden: bool = False) -> Sequence[Post]:
    """Return a user's posts, newest first."""
    query = db.query(Post).filter(Post.user_id == user_id)
    if not include_hidden:
        query = query.filter(Post.status == PostStatus.PUBLISHED)
    return query.order_by(Post.created_at.desc(), Post.id.desc()).all()
