"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rhinoblog.models import PostStatus, UserRole

from .tag import TagResponse


class AuthorSummary(BaseModel):
    """Author details embedded in post and comment payloads."""

    id: int
    username: str
    role: UserRole
    verified: bool
    avatar_url: str | None

    model_config = ConfigDict(from_attributes=True)


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=300)
    content: str = Field(..., min_length=1, description="Markdown content")
    image_url: str | None = Field(None, max_length=2048)
    topic_id: int | None = None
    tags: list[str] = Field(default_factory=list, max_length=20)


class PostUpdate(BaseModel):
    """Partial post update; ``tags`` replaces the full tag set when given."""

    title: str | None = Field(None, min_length=1, max_length=300)
    content: str | None = Field(None, min_length=1)
    image_url: str | None = Field(None, max_length=2048)
    topic_id: int | None = None
    tags: list[str] | None = Field(None, max_length=20)

    @field_validator("title", "content")
    @classmethod
    def _reject_null(cls, value: str | None) -> str:
        # Omitting the field leaves it unchanged.
        if value is None:
            raise ValueError("must not be null")
        return value


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    user_id: int
    title: str
    content: str
    image_url: str | None
    is_ai_generated: bool
    topic_id: int | None
    status: PostStatus
    is_pinned: bool
    upvotes: int
    downvotes: int
    comment_count: int
    reports: int
    moderation_reason: str | None
    moderated_at: datetime | None
    created_at: datetime
    author: AuthorSummary | None = None
    tags: list[TagResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
