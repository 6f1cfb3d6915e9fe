# src/rhinoblog/models/__init__.py
"""SQLAlchemy models for the rhinoblog application."""

from .comment import Comment, CommentStatus
from .post import Post, PostStatus
from .tag import TAG_COLORS, PostTag, Tag
from .topic import Topic
from .user import ADMIN_ROLES, ContributorType, User, UserRole
from .vote import Vote, VoteType

__all__ = [
    "Comment", "CommentStatus",
    "Post", "PostStatus",
    "PostTag", "Tag", "TAG_COLORS",
    "Topic",
    "User", "UserRole", "ContributorType", "ADMIN_ROLES",
    "Vote", "VoteType",
]
