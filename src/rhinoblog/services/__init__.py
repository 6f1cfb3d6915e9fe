# src/rhinoblog/services/__init__.py
"""Business logic services for the rhinoblog application."""

from .errors import (
    BlogError,
    GenerationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from .generation import GenerationClient, GeneratedPost, get_generation_client
from .moderation import ModerationAction, ModerationService
from .scheduler import GenerationScheduler, ScheduleConfig, get_generation_scheduler

__all__ = [
    "BlogError",
    "GenerationError",
    "NotFoundError",
    "PermissionDeniedError",
    "ValidationError",
    "GenerationClient",
    "GeneratedPost",
    "get_generation_client",
    "ModerationAction",
    "ModerationService",
    "GenerationScheduler",
    "ScheduleConfig",
    "get_generation_scheduler",
]
