"""CRUD-style helpers for managing users, roles and credentials."""
from __future__ import annotations

import logging
from typing import Any, Sequence

from sqlalchemy.orm import Session

from rhinoblog.core import security
from rhinoblog.models import Comment, ContributorType, Post, User, UserRole, Vote, VoteType
from rhinoblog.services.comments import remove_comment_tree
from rhinoblog.services.errors import NotFoundError, PermissionDeniedError, ValidationError
from rhinoblog.services.permissions import Permission, has_permission
from rhinoblog.services.trust import can_apply_as_contributor

logger = logging.getLogger(__name__)

__all__ = [
    "get_user",
    "get_user_by_username",
    "get_users",
    "register_user",
    "authenticate_user",
    "token_claims",
    "issue_token",
    "update_profile",
    "change_password",
    "apply_as_contributor",
    "create_user",
    "change_role",
    "verify_contributor",
    "delete_user",
]

_PROFILE_FIELDS = ("email", "bio", "avatar_url", "profile_links")


def get_user(db: Session, user_id: int) -> User | None:
    """Return a single user by primary key."""
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> User | None:
    """Return the user with exactly this username."""
    return db.query(User).filter(User.username == username).first()


def get_users(db: Session, skip: int = 0, limit: int = 100) -> Sequence[User]:
    """Return users with simple offset-based pagination."""
    return db.query(User).order_by(User.id).offset(skip).limit(limit).all()


def _apply_role(
    user: User,
    role: UserRole,
    contributor_type: ContributorType | None,
    verified: bool,
) -> None:
    # contributor_type is set exactly when the role is contributor.
    if role == UserRole.CONTRIBUTOR:
        if contributor_type is None:
            raise ValidationError("contributor_type is required for the contributor role")
        user.contributor_type = contributor_type
        user.verified = verified
    else:
        user.contributor_type = None
        user.verified = role in (UserRole.ADMIN, UserRole.SUPERADMIN)
    user.role = role


def create_user(
    db: Session,
    *,
    username: str,
    password: str,
    email: str | None = None,
    role: UserRole = UserRole.USER,
    contributor_type: ContributorType | None = None,
    verified: bool = True,
) -> User:
    """Persist a new user with a hashed password."""
    if get_user_by_username(db, username) is not None:
        raise ValidationError("Username already exists")
    db_user = User(
        username=username,
        password_hash=security.hash_password(password),
        email=email,
    )
    _apply_role(db_user, role, contributor_type, verified)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def register_user(db: Session, username: str, password: str, email: str | None = None) -> User:
    """Self-service registration; new accounts always get the user role."""
    user = create_user(db, username=username, password=password, email=email)
    logger.info("Registered user %s", user.id)
    return user


def authenticate_user(db: Session, username: str, password: str) -> User | None:
    """Return the user when ``password`` matches, otherwise None."""
    user = get_user_by_username(db, username)
    if user is None or not security.verify_password(password, user.password_hash):
        return None
    return user


def token_claims(user: User) -> dict[str, Any]:
    """Claims embedded in a user's access token."""
    claims: dict[str, Any] = {
        "sub": str(user.id),
        "id": user.id,
        "username": user.username,
        "role": user.role.value,
        "isAdmin": user.is_admin,
    }
    if user.contributor_type is not None:
        claims["contributorType"] = user.contributor_type.value
    return claims


def issue_token(user: User) -> str:
    """Return a signed access token for ``user``."""
    return security.create_access_token(token_claims(user))


def update_profile(db: Session, user: User, changes: dict[str, Any]) -> User:
    """Apply partial profile updates."""
    for key in _PROFILE_FIELDS:
        if key in changes:
            value = changes[key]
            if key == "profile_links" and value is None:
                value = {}
            setattr(user, key, value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    """Replace the user's password after checking the current one."""
    if not security.verify_password(current_password, user.password_hash):
        raise PermissionDeniedError("Current password is incorrect")
    user.password_hash = security.hash_password(new_password)
    db.commit()


def apply_as_contributor(db: Session, user: User, contributor_type: ContributorType) -> User:
    """Turn a trusted user into an unverified contributor.

    The applicant can publish directly only after an admin verifies them.
    """
    if user.role != UserRole.USER:
        raise ValidationError("Only regular users can apply to become contributors")
    if not can_apply_as_contributor(db, user):
        raise PermissionDeniedError("Trust score too low to apply as a contributor")
    _apply_role(user, UserRole.CONTRIBUTOR, contributor_type, verified=False)
    db.commit()
    db.refresh(user)
    logger.info("User %s applied as %s contributor", user.id, contributor_type.value)
    return user


def _require_target(db: Session, user_id: int) -> User:
    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def change_role(
    db: Session,
    actor: User,
    user_id: int,
    role: UserRole,
    contributor_type: ContributorType | None = None,
) -> User:
    """Promote or demote a user.

    Only a superadmin may grant or revoke the superadmin role. Contributors
    appointed by an admin are verified immediately.
    """
    target = _require_target(db, user_id)
    touches_superadmin = UserRole.SUPERADMIN in (role, target.role)
    if touches_superadmin and not has_permission(actor, Permission.MANAGE_ROLES):
        raise PermissionDeniedError("Only a superadmin can grant or revoke superadmin")
    if target.id == actor.id and role != actor.role:
        raise ValidationError("You cannot change your own role")

    _apply_role(target, role, contributor_type, verified=True)
    db.commit()
    db.refresh(target)
    logger.info("User %s set role of user %s to %s", actor.id, target.id, role.value)
    return target


def verify_contributor(db: Session, user_id: int) -> User:
    """Mark a contributor as verified."""
    target = _require_target(db, user_id)
    if target.role != UserRole.CONTRIBUTOR:
        raise ValidationError("Only contributors can be verified")
    target.verified = True
    db.commit()
    db.refresh(target)
    return target


def _retract_votes(db: Session, user: User) -> None:
    for vote in db.query(Vote).filter(Vote.user_id == user.id).all():
        target = db.get(Post, vote.post_id) if vote.post_id is not None else db.get(
            Comment, vote.comment_id
        )
        if target is not None:
            counter = "upvotes" if vote.vote_type == VoteType.UPVOTE else "downvotes"
            setattr(target, counter, max(0, getattr(target, counter) - 1))
        db.delete(vote)
    db.flush()


def delete_user(db: Session, actor: User, user_id: int) -> None:
    """Remove a user with their posts, comments and votes.

    Counters on other users' content are adjusted for the removed comments
    and votes.
    """
    target = _require_target(db, user_id)
    if target.id == actor.id:
        raise ValidationError("You cannot delete your own account")
    if target.is_superadmin and not actor.is_superadmin:
        raise PermissionDeniedError("Only a superadmin can delete a superadmin")

    _retract_votes(db, target)
    comment_ids = [row.id for row in db.query(Comment.id).filter(Comment.user_id == target.id)]
    for comment_id in comment_ids:
        # Replies may already have gone with an earlier parent.
        comment = db.get(Comment, comment_id)
        if comment is not None:
            remove_comment_tree(db, comment)
    db.expire(target)
    db.delete(target)
    db.commit()
    logger.info("User %s deleted user %s", actor.id, user_id)
