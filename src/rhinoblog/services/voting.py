"""Vote casting with per-user toggle and flip semantics."""

from __future__ import annotations

from sqlalchemy.orm import Session

from rhinoblog.models import Comment, Post, Vote, VoteType
from rhinoblog.services.errors import NotFoundError, ValidationError

__all__ = ["cast_vote", "get_user_vote"]


def _counter_name(vote_type: VoteType) -> str:
    return "upvotes" if vote_type == VoteType.UPVOTE else "downvotes"


def _bump(target: Post | Comment, vote_type: VoteType, delta: int) -> None:
    name = _counter_name(vote_type)
    setattr(target, name, getattr(target, name) + delta)


def get_user_vote(
    db: Session,
    user_id: int,
    *,
    post_id: int | None = None,
    comment_id: int | None = None,
) -> Vote | None:
    """Return the user's vote on the given target, if any."""
    query = db.query(Vote).filter(Vote.user_id == user_id)
    if post_id is not None:
        return query.filter(Vote.post_id == post_id).first()
    return query.filter(Vote.comment_id == comment_id).first()


def cast_vote(
    db: Session,
    user_id: int,
    vote_type: VoteType,
    *,
    post_id: int | None = None,
    comment_id: int | None = None,
) -> Post | Comment:
    """Apply a vote to exactly one post or comment.

    No existing vote creates one and increments the matching counter. A
    repeated vote of the same type removes it (toggle off). A vote of the
    other type flips the stored vote, moving one count between counters.

    Returns:
        The updated post or comment.
    """
    if (post_id is None) == (comment_id is None):
        raise ValidationError("A vote targets exactly one of post_id or comment_id")

    target: Post | Comment | None
    if post_id is not None:
        target = db.get(Post, post_id)
        if target is None:
            raise NotFoundError("Post not found")
    else:
        target = db.get(Comment, comment_id)
        if target is None:
            raise NotFoundError("Comment not found")

    existing = get_user_vote(db, user_id, post_id=post_id, comment_id=comment_id)

    if existing is None:
        db.add(
            Vote(
                user_id=user_id,
                post_id=post_id,
                comment_id=comment_id,
                vote_type=vote_type,
            )
        )
        _bump(target, vote_type, 1)
    elif existing.vote_type == vote_type:
        db.delete(existing)
        _bump(target, vote_type, -1)
    else:
        _bump(target, existing.vote_type, -1)
        _bump(target, vote_type, 1)
        existing.vote_type = vote_type

    db.commit()
    db.refresh(target)
    return target
