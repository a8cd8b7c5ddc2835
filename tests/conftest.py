# tests/conftest.py
"""
Shared fixtures: in-memory database, seeded users/posts, API client.
"""
from __future__ import annotations

import httpx
import pytest

from constants import ScoringMode
from database import Base, build_engine, build_session_factory
from repositories import PostRepository, UserRepository


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture
async def engine():
    engine = build_engine("sqlite+aiosqlite://")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def post_repo(session):
    return PostRepository(session)


@pytest.fixture
def user_repo(session):
    return UserRepository(session)


@pytest.fixture
async def user(user_repo):
    return await user_repo.create_user("Alice Citizen", "alice@example.com")


@pytest.fixture
async def admin(user_repo):
    return await user_repo.create_user("Ada Admin", "admin@example.com", is_admin=True)


@pytest.fixture
def make_post(post_repo, user):
    """Factory: create a post directly through the repository."""

    async def _make(description="Streetlight is out", urgency=1, issue_name="Streetlight", **kwargs):
        return await post_repo.report_issue_via_post(
            user_id=user.id,
            issue_name=issue_name,
            post_desc=description,
            urgency=urgency,
            **kwargs,
        )

    return _make


# ---------------------------------------------------------------------------
# External services
# ---------------------------------------------------------------------------

@pytest.fixture
def json_transport():
    """Factory: httpx transport answering every request with one JSON body."""

    def _transport(payload, status_code=200):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json=payload)

        return httpx.MockTransport(handler)

    return _transport


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------

@pytest.fixture
def scoring_mode():
    return ScoringMode.HEURISTIC


@pytest.fixture
async def api_client(session_factory, scoring_mode):
    from api.main import app
    from api.routes import get_image_classifier, get_scoring_mode
    from database import get_session_dependency

    async def override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session_dependency] = override_session
    app.dependency_overrides[get_scoring_mode] = lambda: scoring_mode
    app.dependency_overrides[get_image_classifier] = lambda: None

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def api_users(session_factory):
    """A citizen and an admin, committed before any request."""
    async with session_factory() as session:
        repo = UserRepository(session)
        citizen = await repo.create_user("Carl Citizen", "carl@example.com")
        admin = await repo.create_user("Ada Admin", "ada@example.com", is_admin=True)
        await session.commit()
    return {"citizen": citizen.id, "admin": admin.id}
