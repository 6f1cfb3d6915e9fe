# src/rhinoblog/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin_users import router as admin_users_router
from .auth import router as auth_router
from .comments import router as comments_router
from .generation import router as generation_router
from .moderation import router as moderation_router
from .posts import router as posts_router
from .tags import router as tags_router
from .topics import router as topics_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "users_router",
    "posts_router",
    "comments_router",
    "tags_router",
    "topics_router",
    "moderation_router",
    "admin_users_router",
    "generation_router",
]
