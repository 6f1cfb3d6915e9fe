# src/rhinoblog/schemas/vote.py
"""Vote-related Pydantic schemas."""

from pydantic import BaseModel, Field

from rhinoblog.models import VoteType


class VoteCreate(BaseModel):
    """Schema for casting a vote on a post or comment."""

    vote_type: VoteType = Field(..., description="upvote or downvote")
