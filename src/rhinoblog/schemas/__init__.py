# src/rhinoblog/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentResponse
from .common import MessageResponse
from .generation import (
    BatchGenerationResponse,
    ConnectionTestResponse,
    GenerateCustomRequest,
    GeneratePostRequest,
    GenerationStatusResponse,
    ScheduleResponse,
    ScheduleUpdate,
)
from .moderation import (
    FlaggedContentResponse,
    ModeratedCommentResponse,
    ModerationRequest,
    ModerationStatsResponse,
)
from .post import AuthorSummary, PostCreate, PostResponse, PostUpdate
from .tag import TagCreate, TagResponse, TagUpdate
from .topic import TopicCreate, TopicResponse, TopicUpdate
from .user import (
    AdminUserCreate,
    AuthResponse,
    ContributorApplication,
    CurrentUserResponse,
    LoginRequest,
    PasswordChange,
    ProfileUpdate,
    PublicUserResponse,
    RegisterRequest,
    RoleUpdate,
    UserResponse,
)
from .vote import VoteCreate

__all__ = [
    "CommentCreate", "CommentResponse",
    "MessageResponse",
    "BatchGenerationResponse", "ConnectionTestResponse", "GenerateCustomRequest",
    "GeneratePostRequest", "GenerationStatusResponse", "ScheduleResponse", "ScheduleUpdate",
    "FlaggedContentResponse", "ModeratedCommentResponse", "ModerationRequest",
    "ModerationStatsResponse",
    "AuthorSummary", "PostCreate", "PostResponse", "PostUpdate",
    "TagCreate", "TagResponse", "TagUpdate",
    "TopicCreate", "TopicResponse", "TopicUpdate",
    "AdminUserCreate", "AuthResponse", "ContributorApplication", "CurrentUserResponse",
    "LoginRequest", "PasswordChange", "ProfileUpdate", "PublicUserResponse",
    "RegisterRequest", "RoleUpdate", "UserResponse",
    "VoteCreate",
]
