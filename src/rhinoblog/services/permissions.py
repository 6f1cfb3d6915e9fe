"""Role-based permission checks."""

from __future__ import annotations

from enum import Enum

from rhinoblog.models import Comment, CommentStatus, Post, PostStatus, User, UserRole


class Permission(str, Enum):
    """Capabilities granted to roles."""

    CREATE_POST = "create:post"
    CREATE_COMMENT = "create:comment"
    VOTE = "vote"
    AUTO_PUBLISH_POST = "auto_publish:post"
    EDIT_ANY_POST = "edit:any_post"
    DELETE_ANY_POST = "delete:any_post"
    MODERATE_CONTENT = "moderate:content"
    GENERATE_AI_POST = "generate:ai_post"
    MANAGE_USERS = "manage:users"
    MANAGE_ROLES = "manage:roles"


_BASE = frozenset({Permission.CREATE_POST, Permission.CREATE_COMMENT, Permission.VOTE})
_STAFF = _BASE | {
    Permission.AUTO_PUBLISH_POST,
    Permission.EDIT_ANY_POST,
    Permission.DELETE_ANY_POST,
    Permission.MODERATE_CONTENT,
    Permission.GENERATE_AI_POST,
    Permission.MANAGE_USERS,
}

ROLE_PERMISSIONS: dict[UserRole, frozenset[Permission]] = {
    UserRole.USER: _BASE,
    UserRole.CONTRIBUTOR: _BASE | {Permission.AUTO_PUBLISH_POST},
    UserRole.ADMIN: frozenset(_STAFF),
    UserRole.SUPERADMIN: frozenset(_STAFF | {Permission.MANAGE_ROLES}),
}


def has_permission(user: User, permission: Permission) -> bool:
    """Return True if the user's role grants ``permission``.

    Unverified contributors do not get the auto-publish capability.
    """
    if (
        permission == Permission.AUTO_PUBLISH_POST
        and user.role == UserRole.CONTRIBUTOR
        and not user.verified
    ):
        return False
    return permission in ROLE_PERMISSIONS.get(user.role, frozenset())


def can_modify_post(user: User, post: Post) -> bool:
    """Owners and admins may edit or delete a post."""
    return post.user_id == user.id or has_permission(user, Permission.EDIT_ANY_POST)


def can_modify_comment(user: User, comment: Comment) -> bool:
    """Owners and admins may delete a comment."""
    return comment.user_id == user.id or has_permission(user, Permission.DELETE_ANY_POST)


def can_view_post(user: User | None, post: Post) -> bool:
    """Published posts are public; other states are visible to the owner and admins."""
    if post.status == PostStatus.PUBLISHED:
        return True
    if user is None:
        return False
    return post.user_id == user.id or user.is_admin


def can_view_comment(user: User | None, comment: Comment) -> bool:
    """Published comments under a visible post; hidden ones only to their author and admins."""
    if not can_view_post(user, comment.post):
        return False
    if comment.status == CommentStatus.PUBLISHED:
        return True
    if user is None:
        return False
    return comment.user_id == user.id or user.is_admin
