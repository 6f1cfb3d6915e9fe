"""Versioned API router wiring for v1.

This module composes the version 1 API surface by including the sub-routers
that define their own endpoints. It intentionally contains **no** business
logic and **no** endpoint definitions.

Downstream code should import and mount `api_v1` only.
"""
from __future__ import annotations

from typing import Final

from fastapi import APIRouter

from .endpoints import (
    admin_users_router,
    auth_router,
    comments_router,
    generation_router,
    moderation_router,
    posts_router,
    tags_router,
    topics_router,
    users_router,
)

# Single router for v1; sub-routers declare their own prefixes and tags
api_v1: Final[APIRouter] = APIRouter()
api_v1.include_router(auth_router)
api_v1.include_router(users_router)
api_v1.include_router(posts_router)
api_v1.include_router(comments_router)
api_v1.include_router(tags_router)
api_v1.include_router(topics_router)
api_v1.include_router(moderation_router)
api_v1.include_router(admin_users_router)
api_v1.include_router(generation_router)

__all__ = ["api_v1"]
