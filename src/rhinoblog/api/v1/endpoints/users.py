# src/rhinoblog/api/v1/endpoints/users.py
"""Account and public profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.orm import Session

from rhinoblog.models import Post, User
from rhinoblog.schemas.common import MessageResponse
from rhinoblog.schemas.post import PostResponse
from rhinoblog.schemas.user import (
    ContributorApplication,
    CurrentUserResponse,
    PasswordChange,
    ProfileUpdate,
    PublicUserResponse,
    UserResponse,
)
from rhinoblog.services import user_service
from rhinoblog.services.errors import BlogError
from rhinoblog.services.post_service import list_user_posts
from rhinoblog.services.trust import (
    can_apply_as_contributor,
    can_publish_directly,
    compute_trust_score,
)

from ..dependencies import CurrentUserDep, OptionalUserDep, SessionDep, http_error

router = APIRouter(tags=["users"])


def _current_user_response(db: Session, user: User) -> CurrentUserResponse:
    score = compute_trust_score(db, user)
    return CurrentUserResponse(
        **UserResponse.model_validate(user).model_dump(),
        trust_score=score,
        can_publish_directly=can_publish_directly(db, user, score),
        can_apply_as_contributor=can_apply_as_contributor(db, user, score),
    )


@router.get("/user", response_model=CurrentUserResponse)
async def read_current_user(current_user: CurrentUserDep, db: SessionDep) -> CurrentUserResponse:
    """Return the caller's account with their live trust score."""
    return _current_user_response(db, current_user)


@router.patch("/user/profile", response_model=UserResponse)
async def update_profile(
    payload: ProfileUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> User:
    return user_service.update_profile(db, current_user, payload.model_dump(exclude_unset=True))


@router.post("/user/password", response_model=MessageResponse)
async def change_password(
    payload: PasswordChange,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    try:
        user_service.change_password(
            db, current_user, payload.current_password, payload.new_password
        )
    except BlogError as err:
        raise http_error(err) from err
    return MessageResponse(message="Password updated")


@router.post("/user/contributor-application", response_model=CurrentUserResponse)
async def apply_as_contributor(
    payload: ContributorApplication,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CurrentUserResponse:
    """Become an unverified contributor once the trust threshold is met."""
    try:
        user = user_service.apply_as_contributor(db, current_user, payload.contributor_type)
    except BlogError as err:
        raise http_error(err) from err
    return _current_user_response(db, user)


@router.get("/users/{user_id}", response_model=PublicUserResponse)
async def read_user(user_id: int, db: SessionDep) -> User:
    user = user_service.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/users/{user_id}/posts", response_model=list[PostResponse])
async def read_user_posts(user_id: int, db: SessionDep, viewer: OptionalUserDep) -> list[Post]:
    """Published posts by a user; the owner and admins also see unpublished ones."""
    if user_service.get_user(db, user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    include_hidden = viewer is not None and (viewer.id == user_id or viewer.is_admin)
    return list(list_user_posts(db, user_id, include_hidden=include_hidden))
