"""Comment lifecycle: creation, deletion and tree assembly."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from rhinoblog.models import Comment, CommentStatus, Post, User
from rhinoblog.services.errors import NotFoundError, PermissionDeniedError, ValidationError
from rhinoblog.services.permissions import can_modify_comment, can_view_comment, can_view_post

__all__ = [
    "CommentNode",
    "create_comment",
    "delete_comment",
    "get_visible_comment",
    "list_comments",
    "build_comment_tree",
]


@dataclass
class CommentNode:
    """A comment together with its nested replies."""

    comment: Comment
    replies: list[CommentNode] = field(default_factory=list)


def create_comment(
    db: Session,
    *,
    post_id: int,
    author: User,
    content: str,
    parent_id: int | None = None,
) -> Comment:
    """Create a comment and increment the post's comment counter."""
    post = db.get(Post, post_id)
    if post is None or not can_view_post(author, post):
        raise NotFoundError("Post not found")

    if parent_id is not None:
        parent = db.get(Comment, parent_id)
        if parent is None or parent.post_id != post_id:
            raise ValidationError("Parent comment does not belong to this post")

    comment = Comment(
        post_id=post_id,
        user_id=author.id,
        content=content,
        parent_id=parent_id,
        status=CommentStatus.PUBLISHED,
    )
    db.add(comment)
    post.comment_count += 1
    db.commit()
    db.refresh(comment)
    return comment


def _collect_subtree(db: Session, root: Comment) -> list[Comment]:
    """Return ``root`` and every reply beneath it, deepest first."""
    ordered: list[Comment] = []
    frontier = [root]
    while frontier:
        current = frontier.pop()
        ordered.append(current)
        frontier.extend(db.query(Comment).filter(Comment.parent_id == current.id).all())
    ordered.reverse()
    return ordered


def remove_comment_tree(db: Session, comment: Comment) -> int:
    """Delete a comment and its replies, keeping the post counter in sync.

    Does not commit. Returns the number of comments removed.
    """
    doomed = _collect_subtree(db, comment)
    post = db.get(Post, comment.post_id)
    for item in doomed:
        db.delete(item)
    if post is not None:
        post.comment_count = max(0, post.comment_count - len(doomed))
    db.flush()
    return len(doomed)


def delete_comment(db: Session, comment_id: int, actor: User) -> int:
    """Delete a comment (and its replies) if ``actor`` owns it or is an admin."""
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    if not can_modify_comment(actor, comment):
        raise PermissionDeniedError("Not authorized to delete this comment")

    removed = remove_comment_tree(db, comment)
    db.commit()
    return removed


def get_visible_comment(db: Session, comment_id: int, viewer: User | None) -> Comment:
    """Return a comment if ``viewer`` may see it, else raise NotFoundError."""
    comment = db.get(Comment, comment_id)
    if comment is None or not can_view_comment(viewer, comment):
        raise NotFoundError("Comment not found")
    return comment


def list_comments(db: Session, post_id: int, *, include_hidden: bool = False) -> list[Comment]:
    """Return a post's comments, newest first."""
    query = db.query(Comment).filter(Comment.post_id == post_id)
    if not include_hidden:
        query = query.filter(Comment.status == CommentStatus.PUBLISHED)
    return query.order_by(Comment.created_at.desc(), Comment.id.desc()).all()


def build_comment_tree(comments: Iterable[Comment]) -> list[CommentNode]:
    """Group comments by ``parent_id`` into a tree of arbitrary depth.

    Replies whose parent is absent from ``comments`` (for example a hidden
    parent) are dropped together with their own replies.
    """
    items = list(comments)
    children: dict[int | None, list[Comment]] = defaultdict(list)
    for comment in items:
        children[comment.parent_id].append(comment)

    def _build(parent_id: int | None) -> list[CommentNode]:
        return [
            CommentNode(comment=child, replies=_build(child.id))
            for child in children.get(parent_id, [])
        ]

    return _build(None)
