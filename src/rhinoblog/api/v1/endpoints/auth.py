# src/rhinoblog/api/v1/endpoints/auth.py
"""Authentication endpoints for the rhinoblog API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from rhinoblog.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from rhinoblog.services import user_service
from rhinoblog.services.errors import BlogError

from ..dependencies import SessionDep, http_error

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: SessionDep) -> AuthResponse:
    """Create an account with the ``user`` role and return it with a token."""
    try:
        user = user_service.register_user(db, payload.username, payload.password, payload.email)
    except BlogError as err:
        raise http_error(err) from err
    return AuthResponse(
        user=UserResponse.model_validate(user),
        token=user_service.issue_token(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, db: SessionDep) -> AuthResponse:
    """Exchange a username and password for an access token."""
    user = user_service.authenticate_user(db, payload.username, payload.password)
    if user is None:
        logger.info("Failed login for username %r", payload.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    return AuthResponse(
        user=UserResponse.model_validate(user),
        token=user_service.issue_token(user),
    )
