# src/rhinoblog/api/v1/endpoints/admin_users.py
"""User administration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from rhinoblog.models import User, UserRole
from rhinoblog.schemas.common import MessageResponse
from rhinoblog.schemas.user import AdminUserCreate, RoleUpdate, UserResponse
from rhinoblog.services import user_service
from rhinoblog.services.errors import BlogError, PermissionDeniedError
from rhinoblog.services.permissions import Permission, has_permission

from ..dependencies import AdminUserDep, SessionDep, http_error

router = APIRouter(prefix="/admin/users", tags=["admin"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    _admin: AdminUserDep,
    db: SessionDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
) -> list[User]:
    return list(user_service.get_users(db, skip=skip, limit=limit))


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(payload: AdminUserCreate, admin: AdminUserDep, db: SessionDep) -> User:
    """Create an account with any role; superadmins can only be created by a superadmin."""
    try:
        if payload.role == UserRole.SUPERADMIN and not has_permission(
            admin, Permission.MANAGE_ROLES
        ):
            raise PermissionDeniedError("Only a superadmin can create a superadmin")
        return user_service.create_user(
            db,
            username=payload.username,
            password=payload.password,
            email=payload.email,
            role=payload.role,
            contributor_type=payload.contributor_type,
        )
    except BlogError as err:
        raise http_error(err) from err


@router.patch("/{user_id}/role", response_model=UserResponse)
async def change_role(
    user_id: int,
    payload: RoleUpdate,
    admin: AdminUserDep,
    db: SessionDep,
) -> User:
    try:
        return user_service.change_role(
            db, admin, user_id, payload.role, payload.contributor_type
        )
    except BlogError as err:
        raise http_error(err) from err


@router.post("/{user_id}/verify", response_model=UserResponse)
async def verify_contributor(user_id: int, _admin: AdminUserDep, db: SessionDep) -> User:
    """Verify a contributor so their posts publish directly."""
    try:
        return user_service.verify_contributor(db, user_id)
    except BlogError as err:
        raise http_error(err) from err


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: int, admin: AdminUserDep, db: SessionDep) -> MessageResponse:
    try:
        user_service.delete_user(db, admin, user_id)
    except BlogError as err:
        raise http_error(err) from err
    return MessageResponse(message="User deleted successfully")
