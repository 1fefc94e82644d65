"""
Murmur Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment variables are set before any `app` import so that the
       settings singleton, the module-level engine and the app are built
       for tests (SQLite, known JWT secret, quiet logging).

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:  AsyncMock session for service unit tests
    ├── db_engine:        fresh SQLite file per test with all tables created
    ├── session_factory:  sessions bound to db_engine
    ├── db_session:       session for seeding and inspecting rows
    ├── user / other_user: committed User rows
    ├── auth_headers:     builds `Authorization: Bearer` headers for a user id
    └── test_client:      HTTPX AsyncClient with get_db_session overridden
"""

import os
import tempfile

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = (
    "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(prefix="murmur_test_"), "app.db")
)
os.environ["JWT_SECRET_KEY"] = "test-secret-not-real"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["LOG_LEVEL"] = "WARNING"

import uuid  # noqa: E402
from datetime import datetime, timezone  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from app.config import settings  # noqa: E402
from app.database import Base, dispose_engine, get_db_session  # noqa: E402
from app.models import Post, User  # noqa: E402


def make_token(user_id, **claims) -> str:
    """Sign a token the way the external auth service does."""
    payload = {"userId": str(user_id), **claims}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


# ══════════════════════════════════════════════════════════════════════════
# Unit-test fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Mock async session.

    `flush` fills in the defaults the database would (id, created_at) on the
    object most recently passed to `add`.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = post
    """
    session = AsyncMock()
    session.add = MagicMock()

    async def flush():
        if session.add.call_args is None:
            return
        obj = session.add.call_args[0][0]
        if getattr(obj, "id", None) is None:
            obj.id = uuid.uuid4()
        if getattr(obj, "created_at", None) is None:
            obj.created_at = datetime.now(timezone.utc)

    session.flush = AsyncMock(side_effect=flush)
    return session


# ══════════════════════════════════════════════════════════════════════════
# Database fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'murmur.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def user(db_session) -> User:
    account = User(email="ada@example.com", name="Ada")
    db_session.add(account)
    await db_session.commit()
    return account


@pytest_asyncio.fixture
async def other_user(db_session) -> User:
    account = User(email="grace@example.com", name="Grace")
    db_session.add(account)
    await db_session.commit()
    return account


@pytest.fixture
def auth_headers():
    """Returns a function: auth_headers(user_id) → {"Authorization": "Bearer ..."}."""
    def build(user_id) -> dict:
        return {"Authorization": f"Bearer {make_token(user_id)}"}
    return build


@pytest.fixture
def make_post(db_session):
    """Insert a post directly (bypassing the API), optionally with a file."""
    async def create(author, content="hello", created_at=None, file=None) -> Post:
        post = Post(content=content, author_id=author.id)
        if created_at is not None:
            post.created_at = created_at
        if file is not None:
            post.file_data, post.file_name, post.file_type = file
        db_session.add(post)
        await db_session.commit()
        return post
    return create


# ══════════════════════════════════════════════════════════════════════════
# API client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    Route handlers get sessions from the per-test engine instead of the
    configured one.
    """
    from app.main import app

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
    # /health uses the module-level engine; drop its connections between loops
    await dispose_engine()
