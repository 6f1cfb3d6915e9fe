# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-rhinoblog")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["BOOTSTRAP_ON_STARTUP"] = "false"
os.environ["SCHEDULE_ENABLED"] = "false"
os.environ["BATCH_GENERATION_DELAY_SECONDS"] = "0"

from rhinoblog.api.v1.dependencies import get_generation_client_dep, get_scheduler_dep
from rhinoblog.core.security import hash_password
from rhinoblog.db.session import Base
from rhinoblog.db.session import get_db as app_get_session
from rhinoblog.main import app as fastapi_app
from rhinoblog.models import ContributorType, Post, PostStatus, User, UserRole
from rhinoblog.services.generation import GenerationClient
from rhinoblog.services.scheduler import GenerationScheduler, ScheduleConfig
from rhinoblog.services.user_service import issue_token

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "password123"

# Hashing once keeps fixture users cheap to create.
_TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)
_USERNAME_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory that persists users with the shared test password."""

    def _make_user(
        username: str | None = None,
        role: UserRole = UserRole.USER,
        contributor_type: ContributorType | None = None,
        verified: bool = False,
    ) -> User:
        user = User(
            username=username or f"user{next(_USERNAME_COUNTER)}",
            password_hash=_TEST_PASSWORD_HASH,
            role=role,
            contributor_type=contributor_type,
            verified=verified,
            profile_links={},
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    return make_user("alice")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    return make_user("bob")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user("admin", role=UserRole.ADMIN, verified=True)


@pytest.fixture()
def superadmin_user(make_user: Callable[..., User]) -> User:
    return make_user("root", role=UserRole.SUPERADMIN, verified=True)


def auth_headers(user: User) -> dict[str, str]:
    """Return authorization headers carrying a fresh token for ``user``."""
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return auth_headers(other_user)


@pytest.fixture()
def admin_token(admin_user: User) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture()
def superadmin_token(superadmin_user: User) -> dict[str, str]:
    return auth_headers(superadmin_user)


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Return a factory that inserts posts directly, bypassing the publishing gate."""

    def _make_post(
        author: User,
        title: str = "My rhinoplasty journey",
        status: PostStatus = PostStatus.PUBLISHED,
        upvotes: int = 0,
        **extra: Any,
    ) -> Post:
        post = Post(
            user_id=author.id,
            title=title,
            content=extra.pop("content", "Day one was rough but manageable."),
            status=status,
            upvotes=upvotes,
            **extra,
        )
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make_post


@pytest.fixture()
def test_post(make_post: Callable[..., Post], test_user: User) -> Post:
    """Create a baseline published post for tests."""
    return make_post(test_user)


@pytest.fixture()
def mock_generation_client(app: FastAPI) -> Iterator[AsyncMock]:
    """Replace the generation client dependency with an async mock."""
    mock_client = AsyncMock(spec=GenerationClient)
    app.dependency_overrides[get_generation_client_dep] = lambda: mock_client
    try:
        yield mock_client
    finally:
        app.dependency_overrides.pop(get_generation_client_dep, None)


@pytest.fixture()
def test_scheduler(app: FastAPI) -> Iterator[GenerationScheduler]:
    """Provide an idle scheduler instance wired into the schedule endpoints."""
    scheduler = GenerationScheduler(AsyncMock(), config=ScheduleConfig())
    app.dependency_overrides[get_scheduler_dep] = lambda: scheduler
    try:
        yield scheduler
    finally:
        app.dependency_overrides.pop(get_scheduler_dep, None)
