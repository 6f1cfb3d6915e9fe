"""Trust score computation and the publishing gate.

The score is always derived from current activity; nothing is stored on the
user row, so the value cannot drift from the data it summarises.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func
from sqlalchemy.orm import Session

from rhinoblog.core.settings import settings
from rhinoblog.models import Comment, Post, PostStatus, User
from rhinoblog.services.permissions import Permission, has_permission

BASE_SCORE = 15
MAX_SCORE = 100


@dataclass(frozen=True)
class TrustActivity:
    """Activity counters a trust score is computed from."""

    post_count: int = 0
    comment_count: int = 0
    upvotes_received: int = 0


def trust_score_from_activity(activity: TrustActivity) -> int:
    """Return the capped trust score for the given activity counters."""
    score = (
        BASE_SCORE
        + min(25, 5 * max(0, activity.post_count))
        + min(20, 2 * max(0, activity.comment_count))
        + min(40, max(0, activity.upvotes_received) // 3)
    )
    return max(0, min(MAX_SCORE, score))


def collect_activity(db: Session, user_id: int) -> TrustActivity:
    """Count a user's posts, comments and upvotes received on both."""
    post_count = db.query(func.count(Post.id)).filter(Post.user_id == user_id).scalar() or 0
    comment_count = (
        db.query(func.count(Comment.id)).filter(Comment.user_id == user_id).scalar() or 0
    )
    post_upvotes = (
        db.query(func.coalesce(func.sum(Post.upvotes), 0)).filter(Post.user_id == user_id).scalar()
        or 0
    )
    comment_upvotes = (
        db.query(func.coalesce(func.sum(Comment.upvotes), 0))
        .filter(Comment.user_id == user_id)
        .scalar()
        or 0
    )
    return TrustActivity(
        post_count=int(post_count),
        comment_count=int(comment_count),
        upvotes_received=int(post_upvotes) + int(comment_upvotes),
    )


def compute_trust_score(db: Session, user: User) -> int:
    """Return the user's current trust score in [0, 100]."""
    return trust_score_from_activity(collect_activity(db, user.id))


def meets_trust_threshold(score: int) -> bool:
    return score >= settings.trust_publish_threshold


def can_publish_directly(db: Session, user: User, score: int | None = None) -> bool:
    """True when the user's trust score clears the publishing threshold.

    Pass ``score`` when it has already been computed for this request.
    """
    if score is None:
        score = compute_trust_score(db, user)
    return meets_trust_threshold(score)


def can_apply_as_contributor(db: Session, user: User, score: int | None = None) -> bool:
    """True when the user may apply for the contributor role."""
    if score is None:
        score = compute_trust_score(db, user)
    return meets_trust_threshold(score)


def initial_post_status(db: Session, user: User) -> PostStatus:
    """Decide whether a new post by ``user`` is published or held for review."""
    if has_permission(user, Permission.AUTO_PUBLISH_POST):
        return PostStatus.PUBLISHED
    if can_publish_directly(db, user):
        return PostStatus.PUBLISHED
    return PostStatus.PENDING
