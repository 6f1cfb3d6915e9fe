# src/rhinoblog/api/v1/endpoints/generation.py
"""AI post generation and generation schedule endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from rhinoblog.models import Post
from rhinoblog.schemas.generation import (
    BatchGenerationResponse,
    ConnectionTestResponse,
    GenerateCustomRequest,
    GeneratePostRequest,
    GenerationStatusResponse,
    ScheduleResponse,
    ScheduleUpdate,
)
from rhinoblog.schemas.post import PostResponse
from rhinoblog.services.errors import BlogError
from rhinoblog.services.generation_pipeline import generate_batch, publish_generated_post
from rhinoblog.services.scheduler import GenerationScheduler, ScheduleConfig

from ..dependencies import (
    AdminUserDep,
    GenerationClientDep,
    SchedulerDep,
    SessionDep,
    http_error,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["generation"])


def _generation_failed() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Failed to generate post",
    )


def _schedule_response(scheduler: GenerationScheduler) -> ScheduleResponse:
    return ScheduleResponse(
        enabled=scheduler.config.enabled,
        cron_expression=scheduler.config.cron_expression,
        next_run=scheduler.next_fire,
        last_run=scheduler.last_run_at,
    )


@router.post("/generate-post", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def generate_post(
    payload: GeneratePostRequest,
    admin: AdminUserDep,
    client: GenerationClientDep,
    db: SessionDep,
) -> Post:
    """Generate one post from a brief and publish it under the calling admin."""
    try:
        generated = await client.generate(
            payload.age,
            payload.gender,
            payload.procedure,
            payload.reason,
            payload.content_type,
            payload.topic,
        )
    except BlogError as err:
        raise http_error(err) from err
    if generated is None:
        raise _generation_failed()
    return publish_generated_post(db, admin, generated)


@router.post(
    "/generate-custom",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_custom_post(
    payload: GenerateCustomRequest,
    admin: AdminUserDep,
    client: GenerationClientDep,
    db: SessionDep,
) -> Post:
    """Generate a long-form article from a free-text brief."""
    try:
        generated = await client.generate_custom(payload.prompt, payload.content_type)
    except BlogError as err:
        raise http_error(err) from err
    if generated is None:
        raise _generation_failed()
    return publish_generated_post(db, admin, generated, extra_tags=[payload.content_type])


@router.post("/generate-batch", response_model=BatchGenerationResponse)
async def generate_post_batch(
    admin: AdminUserDep,
    client: GenerationClientDep,
    db: SessionDep,
) -> BatchGenerationResponse:
    """Generate the standard set of educational and experience posts."""
    try:
        posts = await generate_batch(db, admin, client=client)
    except BlogError as err:
        raise http_error(err) from err
    return BatchGenerationResponse(
        message=f"Successfully generated {len(posts)} posts",
        posts=[PostResponse.model_validate(post) for post in posts],
    )


@router.get("/schedule", response_model=ScheduleResponse)
async def read_schedule(_admin: AdminUserDep, scheduler: SchedulerDep) -> ScheduleResponse:
    return _schedule_response(scheduler)


@router.post("/schedule", response_model=ScheduleResponse)
async def update_schedule(
    payload: ScheduleUpdate,
    admin: AdminUserDep,
    scheduler: SchedulerDep,
) -> ScheduleResponse:
    """Replace the generation schedule; the change applies immediately."""
    try:
        scheduler.update(
            ScheduleConfig(enabled=payload.enabled, cron_expression=payload.cron_expression)
        )
    except BlogError as err:
        raise http_error(err) from err
    logger.info("Admin %s updated the generation schedule", admin.id)
    return _schedule_response(scheduler)


@router.get("/generation-status", response_model=GenerationStatusResponse)
async def generation_status(
    _admin: AdminUserDep,
    client: GenerationClientDep,
) -> GenerationStatusResponse:
    return GenerationStatusResponse(**client.status())


@router.post("/test-generation", response_model=ConnectionTestResponse)
async def check_generation_connection(
    admin: AdminUserDep,
    client: GenerationClientDep,
) -> ConnectionTestResponse:
    """Run a short completion against the configured generation service."""
    result = await client.test_connection()
    logger.info("Admin %s tested the generation service: success=%s", admin.id, result["success"])
    return ConnectionTestResponse(**result)
