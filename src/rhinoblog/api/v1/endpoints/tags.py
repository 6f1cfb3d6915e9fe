# src/rhinoblog/api/v1/endpoints/tags.py
"""Tag listing and administration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from rhinoblog.models import Post, Tag
from rhinoblog.schemas.common import MessageResponse
from rhinoblog.schemas.post import PostResponse
from rhinoblog.schemas.tag import TagCreate, TagResponse, TagUpdate
from rhinoblog.services import tagging
from rhinoblog.services.errors import BlogError

from ..dependencies import AdminUserDep, SessionDep, http_error

router = APIRouter(tags=["tags"])


@router.get("/tags", response_model=list[TagResponse])
async def list_tags(db: SessionDep) -> list[Tag]:
    return tagging.list_tags(db)


@router.get("/tags/{name}/posts", response_model=list[PostResponse])
async def list_tag_posts(
    name: str,
    db: SessionDep,
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> list[Post]:
    """Published posts carrying the tag, newest first."""
    try:
        return tagging.list_posts_for_tag(db, name, limit=limit, offset=offset)
    except BlogError as err:
        raise http_error(err) from err


@router.post("/admin/tags", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(payload: TagCreate, _admin: AdminUserDep, db: SessionDep) -> Tag:
    try:
        return tagging.create_tag(db, payload.name, payload.color)
    except BlogError as err:
        raise http_error(err) from err


@router.patch("/admin/tags/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: int,
    payload: TagUpdate,
    _admin: AdminUserDep,
    db: SessionDep,
) -> Tag:
    try:
        return tagging.update_tag(db, tag_id, name=payload.name, color=payload.color)
    except BlogError as err:
        raise http_error(err) from err


@router.delete("/admin/tags/{tag_id}", response_model=MessageResponse)
async def delete_tag(tag_id: int, _admin: AdminUserDep, db: SessionDep) -> MessageResponse:
    """Delete a tag and detach it from every post."""
    try:
        tagging.delete_tag(db, tag_id)
    except BlogError as err:
        raise http_error(err) from err
    return MessageResponse(message="Tag deleted successfully")
