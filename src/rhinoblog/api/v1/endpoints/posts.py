# src/rhinoblog/api/v1/endpoints/posts.py
"""Post-related endpoints for the rhinoblog API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from rhinoblog.models import Post
from rhinoblog.schemas.comment import CommentCreate, CommentResponse
from rhinoblog.schemas.common import MessageResponse
from rhinoblog.schemas.post import PostCreate, PostResponse, PostUpdate
from rhinoblog.schemas.vote import VoteCreate
from rhinoblog.services import comments as comment_service
from rhinoblog.services import post_service
from rhinoblog.services.comments import CommentNode
from rhinoblog.services.errors import BlogError
from rhinoblog.services.moderation import ModerationService
from rhinoblog.services.voting import cast_vote

from ..dependencies import CurrentUserDep, OptionalUserDep, SessionDep, http_error

router = APIRouter(prefix="/posts", tags=["posts"])


def serialize_comment_tree(nodes: list[CommentNode]) -> list[CommentResponse]:
    """Convert comment tree nodes into nested response models."""
    return [
        CommentResponse.model_validate(node.comment).model_copy(
            update={"replies": serialize_comment_tree(node.replies)}
        )
        for node in nodes
    ]


@router.get("", response_model=list[PostResponse])
async def list_posts(
    db: SessionDep,
    limit: int = Query(10, ge=1, le=100, description="Maximum number of posts to return"),
    offset: int = Query(0, ge=0, description="Number of posts to skip"),
    tag: str | None = Query(None, description="Only posts carrying this tag"),
    topic: str | None = Query(None, description="Only posts in the topic with this slug"),
) -> list[Post]:
    """List published posts, pinned first and then newest first.

    Args:
        db: Database session
        limit: Maximum number of posts to return (max 100)
        offset: Pagination offset
        tag: Optional tag name filter
        topic: Optional topic slug filter

    Returns:
        Published posts in feed order
    """
    return list(post_service.list_feed(db, limit=limit, offset=offset, tag=tag, topic_slug=topic))


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, db: SessionDep, viewer: OptionalUserDep) -> Post:
    """Return a post; unpublished posts are visible to their owner and admins only."""
    try:
        return post_service.get_visible_post(db, post_id, viewer)
    except BlogError as err:
        raise http_error(err) from err


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(payload: PostCreate, current_user: CurrentUserDep, db: SessionDep) -> Post:
    """Create a post; the author's trust decides whether it is published or pending."""
    try:
        return post_service.create_post(
            db,
            author=current_user,
            title=payload.title,
            content=payload.content,
            image_url=payload.image_url,
            topic_id=payload.topic_id,
            tags=payload.tags,
        )
    except BlogError as err:
        raise http_error(err) from err


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    payload: PostUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Post:
    changes = payload.model_dump(exclude_unset=True, exclude={"tags"})
    try:
        return post_service.update_post(db, post_id, current_user, changes, tags=payload.tags)
    except BlogError as err:
        raise http_error(err) from err


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> MessageResponse:
    try:
        post_service.delete_post(db, post_id, current_user)
    except BlogError as err:
        raise http_error(err) from err
    return MessageResponse(message="Post deleted successfully")


@router.post("/{post_id}/vote", response_model=PostResponse)
async def vote_on_post(
    post_id: int,
    payload: VoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Post:
    """Upvote or downvote a post; repeating the same vote removes it."""
    try:
        post_service.get_visible_post(db, post_id, current_user)
        target = cast_vote(db, current_user.id, payload.vote_type, post_id=post_id)
    except BlogError as err:
        raise http_error(err) from err
    return target  # type: ignore[return-value]


@router.post("/{post_id}/report", response_model=MessageResponse)
async def report_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> MessageResponse:
    """Report a post to the moderators."""
    try:
        post_service.get_visible_post(db, post_id, current_user)
        ModerationService.report_post(db, post_id)
    except BlogError as err:
        raise http_error(err) from err
    return MessageResponse(message="Post reported")


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_post_comments(
    post_id: int,
    db: SessionDep,
    viewer: OptionalUserDep,
) -> list[CommentResponse]:
    """Return the post's comments as a tree of replies."""
    try:
        post_service.get_visible_post(db, post_id, viewer)
    except BlogError as err:
        raise http_error(err) from err
    include_hidden = viewer is not None and viewer.is_admin
    comments = comment_service.list_comments(db, post_id, include_hidden=include_hidden)
    return serialize_comment_tree(comment_service.build_comment_tree(comments))


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_post_comment(
    post_id: int,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CommentResponse:
    try:
        comment = comment_service.create_comment(
            db,
            post_id=post_id,
            author=current_user,
            content=payload.content,
            parent_id=payload.parent_id,
        )
    except BlogError as err:
        raise http_error(err) from err
    return CommentResponse.model_validate(comment)
