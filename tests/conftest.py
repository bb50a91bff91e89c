"""
Shared fixtures for the test suite.

Storage-backed tests run against a fresh SQLite file per test (aiosqlite), so
the real SQL filters, orderings and windows are exercised. API tests drive the
ASGI app in-process with the database dependency pointed at that file.
"""

import os

# Must be set before taskmanager is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-length-1234")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections.abc import AsyncGenerator  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession  # noqa: E402

from taskmanager.config import TaskQueryConfig, TokenConfig  # noqa: E402
from taskmanager.db import (  # noqa: E402
    create_engine_for_url,
    create_session_factory,
    get_app_db,
    init_db,
)
from taskmanager.db_handlers import UserDBHandler  # noqa: E402
from taskmanager.models import User  # noqa: E402
from taskmanager.services.task_service import TaskService  # noqa: E402
from taskmanager.services.token_service import TokenService  # noqa: E402
from taskmanager.services.user_service import UserService  # noqa: E402


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    engine_ = create_engine_for_url(f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}")
    await init_db(engine_)
    yield engine_
    await engine_.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def query_config() -> TaskQueryConfig:
    return TaskQueryConfig(default_sort_field="duedate", default_page_size=10, max_page_size=50)


@pytest.fixture
def task_service(query_config: TaskQueryConfig) -> TaskService:
    return TaskService(query_config=query_config)


@pytest.fixture
def user_service() -> UserService:
    return UserService()


@pytest.fixture
def token_config() -> TokenConfig:
    return TokenConfig(secret_key="unit-test-secret", algorithm="HS256", expire_minutes=60)


@pytest.fixture
def token_service(token_config: TokenConfig) -> TokenService:
    return TokenService(token_config)


@pytest.fixture
def make_user(db: AsyncSession):
    """Insert a user directly, skipping bcrypt, for task-only tests."""

    async def _make_user(username: str) -> User:
        return await UserDBHandler().create(
            {
                "username": username,
                "email": f"{username}@example.com",
                "hashed_password": "not-a-bcrypt-hash",
            },
            db=db,
        )

    return _make_user


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    In-process HTTP client for the API.

    The lifespan (which targets the configured production database) is not
    run; each request gets its own session on the per-test SQLite file.
    """
    from main import create_app

    app = create_app()

    async def override_get_app_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_app_db] = override_get_app_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
