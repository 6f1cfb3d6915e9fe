"""Comment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from rhinoblog.models import CommentStatus

from .post import AuthorSummary


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=10000)
    parent_id: int | None = None


class CommentResponse(BaseModel):
    """A comment with its nested replies."""

    id: int
    post_id: int
    user_id: int
    content: str
    parent_id: int | None
    upvotes: int
    downvotes: int
    status: CommentStatus
    created_at: datetime
    author: AuthorSummary | None = None
    replies: list[CommentResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
