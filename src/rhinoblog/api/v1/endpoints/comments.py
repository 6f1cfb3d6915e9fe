# src/rhinoblog/api/v1/endpoints/comments.py
"""Comment endpoints that address a comment directly."""

from __future__ import annotations

from fastapi import APIRouter

from rhinoblog.models import Comment
from rhinoblog.schemas.comment import CommentResponse
from rhinoblog.schemas.common import MessageResponse
from rhinoblog.schemas.vote import VoteCreate
from rhinoblog.services.comments import delete_comment, get_visible_comment
from rhinoblog.services.errors import BlogError
from rhinoblog.services.voting import cast_vote

from ..dependencies import CurrentUserDep, SessionDep, http_error

router = APIRouter(prefix="/comments", tags=["comments"])


@router.delete("/{comment_id}", response_model=MessageResponse)
async def remove_comment(
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Delete a comment and its replies (owner or admin)."""
    try:
        delete_comment(db, comment_id, current_user)
    except BlogError as err:
        raise http_error(err) from err
    return MessageResponse(message="Comment deleted successfully")


@router.post("/{comment_id}/vote", response_model=CommentResponse)
async def vote_on_comment(
    comment_id: int,
    payload: VoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Comment:
    """Vote on a comment the caller can see."""
    try:
        get_visible_comment(db, comment_id, current_user)
        return cast_vote(db, current_user.id, payload.vote_type, comment_id=comment_id)  # type: ignore[return-value]
    except BlogError as err:
        raise http_error(err) from err
