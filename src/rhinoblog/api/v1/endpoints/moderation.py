# src/rhinoblog/api/v1/endpoints/moderation.py
"""Moderation endpoints for admins."""

from __future__ import annotations

from fastapi import APIRouter, Query

from rhinoblog.models import Comment, Post
from rhinoblog.schemas.moderation import (
    FlaggedContentResponse,
    ModeratedCommentResponse,
    ModerationRequest,
    ModerationStatsResponse,
)
from rhinoblog.schemas.post import PostResponse
from rhinoblog.services.errors import BlogError
from rhinoblog.services.moderation import ModerationService

from ..dependencies import AdminUserDep, SessionDep, http_error

router = APIRouter(prefix="/admin/moderation", tags=["moderation"])


@router.post("/posts/{post_id}", response_model=PostResponse)
async def moderate_post(
    post_id: int,
    payload: ModerationRequest,
    admin: AdminUserDep,
    db: SessionDep,
) -> Post:
    """Approve, reject, flag, pin or unpin a post."""
    try:
        return ModerationService.moderate_post(db, post_id, payload.action, admin, payload.reason)
    except BlogError as err:
        raise http_error(err) from err


@router.post("/comments/{comment_id}", response_model=ModeratedCommentResponse)
async def moderate_comment(
    comment_id: int,
    payload: ModerationRequest,
    admin: AdminUserDep,
    db: SessionDep,
) -> Comment:
    """Approve, reject or flag a comment."""
    try:
        return ModerationService.moderate_comment(
            db, comment_id, payload.action, admin, payload.reason
        )
    except BlogError as err:
        raise http_error(err) from err


@router.get("/pending", response_model=list[PostResponse])
async def list_pending_posts(
    _admin: AdminUserDep,
    db: SessionDep,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> list[Post]:
    """Posts waiting for review, oldest first."""
    return ModerationService.list_pending(db, limit=limit, offset=offset)


@router.get("/flagged", response_model=FlaggedContentResponse)
async def list_flagged_content(_admin: AdminUserDep, db: SessionDep) -> FlaggedContentResponse:
    posts, comments = ModerationService.list_flagged(db)
    return FlaggedContentResponse(
        posts=[PostResponse.model_validate(post) for post in posts],
        comments=[ModeratedCommentResponse.model_validate(comment) for comment in comments],
    )


@router.get("/stats", response_model=ModerationStatsResponse)
async def moderation_stats(_admin: AdminUserDep, db: SessionDep) -> ModerationStatsResponse:
    return ModerationStatsResponse.model_validate(ModerationService.moderation_stats(db))
