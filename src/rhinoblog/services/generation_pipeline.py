"""Turn generated drafts into published posts, on demand or on schedule."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy.orm import Session

from rhinoblog.core.settings import settings
from rhinoblog.db.session import SessionLocal
from rhinoblog.models import Post, PostStatus, User, UserRole
from rhinoblog.services.errors import GenerationError
from rhinoblog.services.generation import (
    EDUCATIONAL,
    PERSONAL,
    GeneratedPost,
    GenerationClient,
    get_generation_client,
)
from rhinoblog.services.post_service import create_post

logger = logging.getLogger(__name__)

SCHEDULED_AGES = ("18", "21", "24", "27", "30", "35", "40", "45")
SCHEDULED_GENDERS = ("male", "female", "non-binary")
SCHEDULED_PROCEDURES = ("closed", "open", "ethnic", "revision", "tip plasty")
SCHEDULED_REASONS = (
    "fixing a deviated septum",
    "correcting a dorsal hump",
    "refining a bulbous tip",
    "improving breathing",
    "fixing a previous surgery",
    "reshaping after injury",
    "ethnic refinement",
)

OUTCOME_SUFFIXES = {
    "positive": "with great results and smooth recovery",
    "mixed": "with some complications but eventual satisfaction",
    "negative": "with complications and a difficult recovery",
}


@dataclass(frozen=True)
class EducationalBrief:
    title: str
    topic: str


@dataclass(frozen=True)
class ExperienceBrief:
    age: str
    gender: str
    procedure: str
    reason: str
    outcome: str


BATCH_EDUCATIONAL = (
    EducationalBrief(
        title="What to Expect After Rhinoplasty: A Complete Day-by-Day Recovery Guide",
        topic="post-surgery recovery timeline",
    ),
    EducationalBrief(
        title="Different Types of Rhinoplasty Procedures Explained",
        topic="rhinoplasty procedure types comparison",
    ),
)
BATCH_EXPERIENCES = (
    ExperienceBrief("24", "female", "closed", "fixing a dorsal hump", "positive"),
    ExperienceBrief("32", "male", "open", "improving breathing", "positive"),
)


def first_admin(db: Session) -> User | None:
    """Return the admin or superadmin with the lowest id."""
    return (
        db.query(User)
        .filter(User.role.in_((UserRole.ADMIN, UserRole.SUPERADMIN)))
        .order_by(User.id)
        .first()
    )


def publish_generated_post(
    db: Session,
    author: User,
    generated: GeneratedPost,
    extra_tags: Iterable[str] = (),
    title_override: str | None = None,
) -> Post:
    """Store a generated draft as a published, AI-generated post."""
    post = create_post(
        db,
        author=author,
        title=title_override or generated.title,
        content=generated.content,
        tags=[*generated.tags, *extra_tags],
        status=PostStatus.PUBLISHED,
        is_ai_generated=True,
    )
    logger.info("Published generated post %s", post.id)
    return post


async def generate_scheduled_post(
    db: Session,
    client: GenerationClient | None = None,
    rng: random.Random | None = None,
) -> Post | None:
    """Generate one personal story from random demographics and publish it.

    Returns None when there is no admin to own the post or generation fails.
    """
    client = client or get_generation_client()
    chooser = rng or random
    author = first_admin(db)
    if author is None:
        logger.error("Scheduled generation skipped: no admin user exists")
        return None

    age = chooser.choice(SCHEDULED_AGES)
    gender = chooser.choice(SCHEDULED_GENDERS)
    procedure = chooser.choice(SCHEDULED_PROCEDURES)
    reason = chooser.choice(SCHEDULED_REASONS)

    try:
        generated = await client.generate(age, gender, procedure, reason)
    except GenerationError as exc:
        logger.error("Scheduled generation failed: %s", exc)
        return None
    if generated is None:
        logger.error("Scheduled generation produced no post")
        return None
    return publish_generated_post(db, author, generated)


async def run_scheduled_generation() -> None:
    """Scheduler job: run one scheduled generation in a fresh session."""
    db = SessionLocal()
    try:
        await generate_scheduled_post(db)
    finally:
        db.close()


async def generate_batch(
    db: Session,
    author: User,
    client: GenerationClient | None = None,
    delay_seconds: float | None = None,
) -> list[Post]:
    """Generate the fixed set of educational articles and experience stories.

    Items run one after another with a pause between calls. A failed item
    is logged and skipped.
    """
    client = client or get_generation_client()
    delay = settings.batch_generation_delay_seconds if delay_seconds is None else delay_seconds
    created: list[Post] = []
    first = True

    async def _pause() -> None:
        nonlocal first
        if not first and delay > 0:
            await asyncio.sleep(delay)
        first = False

    for brief in BATCH_EDUCATIONAL:
        await _pause()
        generated = await client.generate(
            "30", "N/A", "informational", brief.topic, EDUCATIONAL, brief.topic
        )
        if generated is None:
            logger.error("Batch generation failed for topic %r", brief.topic)
            continue
        created.append(
            publish_generated_post(
                db, author, generated, extra_tags=[EDUCATIONAL], title_override=brief.title
            )
        )

    for story in BATCH_EXPERIENCES:
        await _pause()
        reason = f"{story.reason} {OUTCOME_SUFFIXES[story.outcome]}"
        generated = await client.generate(
            story.age, story.gender, story.procedure, reason, PERSONAL
        )
        if generated is None:
            logger.error("Batch generation failed for %s %s story", story.age, story.gender)
            continue
        created.append(publish_generated_post(db, author, generated, extra_tags=[story.outcome]))

    logger.info("Batch generation created %d posts", len(created))
    return created
