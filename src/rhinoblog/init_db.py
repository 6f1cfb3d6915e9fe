# src/rhinoblog/init_db.py
"""Create tables and seed the default tag palette and administrator."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from rhinoblog.core.settings import settings
from rhinoblog.db.session import SessionLocal, create_tables
from rhinoblog.models import Tag, UserRole
from rhinoblog.services.tagging import get_tag_by_name
from rhinoblog.services.user_service import create_user, get_user_by_username

logger = logging.getLogger(__name__)

DEFAULT_TAGS: tuple[tuple[str, str], ...] = (
    ("closedrhinoplasty", "blue"),
    ("openrhinoplasty", "indigo"),
    ("recovery", "green"),
    ("day1", "red"),
    ("beforeafter", "yellow"),
    ("revision", "red"),
    ("guide", "blue"),
    ("tipplasty", "gray"),
    ("ethnicrhinoplasty", "pink"),
    ("surgeonadvice", "blue"),
    ("castremoval", "orange"),
    ("1month", "purple"),
)


def seed_default_tags(db: Session) -> int:
    """Insert any missing default tags. Returns how many were created."""
    created = 0
    for name, color in DEFAULT_TAGS:
        if get_tag_by_name(db, name) is None:
            db.add(Tag(name=name, color=color))
            created += 1
    db.commit()
    return created


def seed_admin(db: Session) -> None:
    """Create the configured superadmin account if it does not exist yet."""
    if not settings.seed_admin_password:
        return
    if get_user_by_username(db, settings.seed_admin_username) is not None:
        return
    create_user(
        db,
        username=settings.seed_admin_username,
        password=settings.seed_admin_password,
        email=settings.seed_admin_email,
        role=UserRole.SUPERADMIN,
    )
    logger.info("Seeded administrator account %s", settings.seed_admin_username)


def init_db() -> None:
    """Initialize the database by creating all tables and seeding defaults."""
    create_tables()
    db = SessionLocal()
    try:
        created = seed_default_tags(db)
        if created:
            logger.info("Seeded %d default tags", created)
        seed_admin(db)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    init_db()
    logger.info("Database initialized.")
