"""Pytest configuration and shared fixtures."""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import date
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from vibe_awards.db.session import build_engine, build_session_factory
from vibe_awards.db.utils import create_tables
from vibe_awards.dependencies import get_db
from vibe_awards.main import app
from vibe_awards.models import Battle, CollaborationPost, Submission, User
from vibe_awards.services.auth_service import create_access_token, hash_password


# ============================================================================
# BUILDERS
# ============================================================================

async def make_user(session: AsyncSession, username: str, role: str = "developer") -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        hashed_password=hash_password("password123"),
        role=role,
    )
    session.add(user)
    await session.flush()
    return user


async def make_submission(
    session: AsyncSession,
    developer: User,
    name: str = "Test App",
    status: str = "approved",
    **fields,
) -> Submission:
    defaults = {
        "short_description": f"{name} in one line",
        "full_description": f"{name}, described at length",
        "category": "Productivity",
        "platform": "Web",
    }
    defaults.update(fields)
    submission = Submission(developer_id=developer.id, name=name, status=status, **defaults)
    session.add(submission)
    await session.flush()
    return submission


async def make_battle(
    session: AsyncSession,
    submission_a: Submission,
    submission_b: Submission,
    status: str = "active",
) -> Battle:
    battle = Battle(
        submission_a_id=submission_a.id,
        submission_b_id=submission_b.id,
        battle_date=date.today(),
        status=status,
    )
    session.add(battle)
    await session.flush()
    return battle


async def make_post(session: AsyncSession, owner: User, title: str = "Need a designer", **fields) -> CollaborationPost:
    defaults = {
        "description": "Looking for help",
        "project_stage": "prototype",
        "collaboration_type": "designer",
        "skills_needed": "Figma",
        "project_category": "Productivity",
    }
    defaults.update(fields)
    post = CollaborationPost(user_id=owner.id, title=title, **defaults)
    session.add(post)
    await session.flush()
    return post


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

@pytest_asyncio.fixture
async def test_db():
    """Create an in-memory SQLite database for testing."""
    engine = build_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    await create_tables(engine)

    SessionLocal = build_session_factory(engine)
    async with SessionLocal() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def file_engine(tmp_path):
    """File-backed SQLite database, for tests that need several connections."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'vibe_awards_test.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(file_engine):
    return build_session_factory(file_engine)


# ============================================================================
# SAMPLE DATA (in-memory database)
# ============================================================================

@pytest_asyncio.fixture
async def developer(test_db: AsyncSession) -> User:
    user = await make_user(test_db, "dev_one")
    await test_db.commit()
    return user


@pytest_asyncio.fixture
async def submission(test_db: AsyncSession, developer: User) -> Submission:
    app = await make_submission(test_db, developer, name="Alpha")
    await test_db.commit()
    return app


@pytest_asyncio.fixture
async def other_submission(test_db: AsyncSession, developer: User) -> Submission:
    app = await make_submission(test_db, developer, name="Beta")
    await test_db.commit()
    return app


@pytest_asyncio.fixture
async def battle(test_db: AsyncSession, submission: Submission, other_submission: Submission) -> Battle:
    b = await make_battle(test_db, submission, other_submission)
    await test_db.commit()
    return b


# ============================================================================
# HTTP CLIENT (file database)
# ============================================================================

@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with get_db bound to the test database.

    Rate limiting is switched off; tests that exercise it install their
    own limiter on app.state.
    """

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except BaseException:
                await session.rollback()
                raise

    saved_limiter = app.state.rate_limiter
    app.state.rate_limiter = None
    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app, client=("203.0.113.7", 51000))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    app.state.rate_limiter = saved_limiter
