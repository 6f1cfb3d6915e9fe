# src/rhinoblog/schemas/moderation.py
"""Moderation-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from rhinoblog.models import CommentStatus

from .post import PostResponse


class ModerationRequest(BaseModel):
    """Schema for applying a moderation action."""

    action: str = Field(..., description="approve, reject, flag, pin or unpin")
    reason: str | None = Field(None, max_length=1000)


class ModeratedCommentResponse(BaseModel):
    """Comment state after moderation."""

    id: int
    post_id: int
    user_id: int
    content: str
    parent_id: int | None
    status: CommentStatus
    moderation_reason: str | None
    moderated_at: datetime | None
    moderated_by: int | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FlaggedContentResponse(BaseModel):
    posts: list[PostResponse]
    comments: list[ModeratedCommentResponse]


class ModerationStatsResponse(BaseModel):
    """Counts shown on the moderation dashboard."""

    pending_posts: int
    published_posts: int
    rejected_posts: int
    flagged_posts: int
    pinned_posts: int
    flagged_comments: int
    rejected_comments: int
    total_reports: int

    model_config = ConfigDict(from_attributes=True)
