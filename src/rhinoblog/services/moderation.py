# src/rhinoblog/services/moderation.py
"""Moderation services for posts and comments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import func
from sqlalchemy.orm import Session

from rhinoblog.db.time import utcnow
from rhinoblog.models import Comment, CommentStatus, Post, PostStatus, User
from rhinoblog.services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class ModerationAction(str, Enum):
    """Actions a moderator can take."""

    APPROVE = "approve"
    REJECT = "reject"
    FLAG = "flag"
    PIN = "pin"
    UNPIN = "unpin"


POST_ACTIONS = (
    ModerationAction.APPROVE,
    ModerationAction.REJECT,
    ModerationAction.FLAG,
    ModerationAction.PIN,
    ModerationAction.UNPIN,
)
COMMENT_ACTIONS = (
    ModerationAction.APPROVE,
    ModerationAction.REJECT,
    ModerationAction.FLAG,
)

# Every action is legal from every status; pin/unpin leave the status alone.
POST_TRANSITIONS: dict[ModerationAction, PostStatus | None] = {
    ModerationAction.APPROVE: PostStatus.PUBLISHED,
    ModerationAction.REJECT: PostStatus.REJECTED,
    ModerationAction.FLAG: PostStatus.FLAGGED,
    ModerationAction.PIN: None,
    ModerationAction.UNPIN: None,
}
COMMENT_TRANSITIONS: dict[ModerationAction, CommentStatus] = {
    ModerationAction.APPROVE: CommentStatus.PUBLISHED,
    ModerationAction.REJECT: CommentStatus.REJECTED,
    ModerationAction.FLAG: CommentStatus.FLAGGED,
}

DEFAULT_REASONS: dict[ModerationAction, str] = {
    ModerationAction.APPROVE: "Approved by moderator",
    ModerationAction.REJECT: "Rejected by moderator",
    ModerationAction.FLAG: "Flagged for review",
}


def parse_action(value: str, allowed: tuple[ModerationAction, ...]) -> ModerationAction:
    """Return the action named by ``value`` or raise ValidationError."""
    for action in allowed:
        if action.value == value:
            return action
    valid = ", ".join(action.value for action in allowed)
    raise ValidationError(f"Invalid action '{value}'. Must be one of: {valid}")


@dataclass(frozen=True)
class ModerationStats:
    """Counts reported on the admin moderation dashboard."""

    pending_posts: int
    published_posts: int
    rejected_posts: int
    flagged_posts: int
    pinned_posts: int
    flagged_comments: int
    rejected_comments: int
    total_reports: int


class ModerationService:
    """Service applying moderator actions and reporting queue state."""

    @staticmethod
    def moderate_post(
        db: Session,
        post_id: int,
        action: str,
        moderator: User,
        reason: str | None = None,
    ) -> Post:
        """Apply ``action`` to a post.

        Args:
            db: Database session
            post_id: ID of the post to moderate
            action: One of approve, reject, flag, pin, unpin
            moderator: Admin performing the action
            reason: Optional free-text reason; a default is used when empty

        Returns:
            The updated post.
        """
        parsed = parse_action(action, POST_ACTIONS)
        post = db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found")

        target_status = POST_TRANSITIONS[parsed]
        if target_status is None:
            post.is_pinned = parsed == ModerationAction.PIN
        else:
            post.status = target_status
            post.moderated_at = utcnow()
            post.moderated_by = moderator.id
            post.moderation_reason = reason or DEFAULT_REASONS[parsed]

        db.commit()
        db.refresh(post)
        logger.info(
            "Moderator %s applied %s to post %s", moderator.id, parsed.value, post.id
        )
        return post

    @staticmethod
    def moderate_comment(
        db: Session,
        comment_id: int,
        action: str,
        moderator: User,
        reason: str | None = None,
    ) -> Comment:
        """Apply approve, reject or flag to a comment."""
        parsed = parse_action(action, COMMENT_ACTIONS)
        comment = db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")

        comment.status = COMMENT_TRANSITIONS[parsed]
        comment.moderated_at = utcnow()
        comment.moderated_by = moderator.id
        comment.moderation_reason = reason or DEFAULT_REASONS[parsed]

        db.commit()
        db.refresh(comment)
        logger.info(
            "Moderator %s applied %s to comment %s", moderator.id, parsed.value, comment.id
        )
        return comment

    @staticmethod
    def report_post(db: Session, post_id: int) -> Post:
        """Increment a post's report counter."""
        post = db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        post.reports += 1
        db.commit()
        db.refresh(post)
        return post

    @staticmethod
    def list_pending(db: Session, limit: int = 50, offset: int = 0) -> list[Post]:
        """Return posts awaiting review, oldest first."""
        return (
            db.query(Post)
            .filter(Post.status == PostStatus.PENDING)
            .order_by(Post.created_at.asc(), Post.id.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    @staticmethod
    def list_flagged(db: Session) -> tuple[list[Post], list[Comment]]:
        """Return flagged posts and flagged comments, newest first."""
        posts = (
            db.query(Post)
            .filter(Post.status == PostStatus.FLAGGED)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .all()
        )
        comments = (
            db.query(Comment)
            .filter(Comment.status == CommentStatus.FLAGGED)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .all()
        )
        return posts, comments

    @staticmethod
    def moderation_stats(db: Session) -> ModerationStats:
        """Summarize post and comment moderation state."""
        post_counts = dict(
            db.query(Post.status, func.count(Post.id)).group_by(Post.status).all()
        )
        comment_counts = dict(
            db.query(Comment.status, func.count(Comment.id)).group_by(Comment.status).all()
        )
        pinned = db.query(func.count(Post.id)).filter(Post.is_pinned.is_(True)).scalar() or 0
        reports = db.query(func.coalesce(func.sum(Post.reports), 0)).scalar() or 0

        return ModerationStats(
            pending_posts=post_counts.get(PostStatus.PENDING, 0),
            published_posts=post_counts.get(PostStatus.PUBLISHED, 0),
            rejected_posts=post_counts.get(PostStatus.REJECTED, 0),
            flagged_posts=post_counts.get(PostStatus.FLAGGED, 0),
            pinned_posts=int(pinned),
            flagged_comments=comment_counts.get(CommentStatus.FLAGGED, 0),
            rejected_comments=comment_counts.get(CommentStatus.REJECTED, 0),
            total_reports=int(reports),
        )
