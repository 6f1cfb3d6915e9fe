# src/rhinoblog/api/v1/endpoints/topics.py
"""Topic listing and administration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from rhinoblog.models import Post, Topic
from rhinoblog.schemas.common import MessageResponse
from rhinoblog.schemas.post import PostResponse
from rhinoblog.schemas.topic import TopicCreate, TopicResponse, TopicUpdate
from rhinoblog.services import topics as topic_service
from rhinoblog.services.errors import BlogError

from ..dependencies import AdminUserDep, SessionDep, http_error

router = APIRouter(tags=["topics"])


@router.get("/topics", response_model=list[TopicResponse])
async def list_topics(db: SessionDep) -> list[Topic]:
    return topic_service.list_topics(db)


@router.get("/topics/slug/{slug}", response_model=TopicResponse)
async def get_topic(slug: str, db: SessionDep) -> Topic:
    try:
        return topic_service.get_topic_by_slug(db, slug)
    except BlogError as err:
        raise http_error(err) from err


@router.get("/topics/{slug}/posts", response_model=list[PostResponse])
async def list_topic_posts(
    slug: str,
    db: SessionDep,
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> list[Post]:
    try:
        return topic_service.list_topic_posts(db, slug, limit=limit, offset=offset)
    except BlogError as err:
        raise http_error(err) from err


@router.post("/admin/topics", response_model=TopicResponse, status_code=status.HTTP_201_CREATED)
async def create_topic(payload: TopicCreate, _admin: AdminUserDep, db: SessionDep) -> Topic:
    try:
        return topic_service.create_topic(db, **payload.model_dump())
    except BlogError as err:
        raise http_error(err) from err


@router.put("/admin/topics/{topic_id}", response_model=TopicResponse)
async def update_topic(
    topic_id: int,
    payload: TopicUpdate,
    _admin: AdminUserDep,
    db: SessionDep,
) -> Topic:
    try:
        return topic_service.update_topic(db, topic_id, payload.model_dump(exclude_unset=True))
    except BlogError as err:
        raise http_error(err) from err


@router.delete("/admin/topics/{topic_id}", response_model=MessageResponse)
async def delete_topic(topic_id: int, _admin: AdminUserDep, db: SessionDep) -> MessageResponse:
    """Delete a topic; its posts stay and lose the topic."""
    try:
        topic_service.delete_topic(db, topic_id)
    except BlogError as err:
        raise http_error(err) from err
    return MessageResponse(message="Topic deleted successfully")
