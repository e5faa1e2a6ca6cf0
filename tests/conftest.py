"""
Pytest configuration and shared fixtures for all tests.
"""
import uuid
from datetime import datetime
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from crewwell.api.deps import get_wellness_ai
from crewwell.core.config import Settings, get_settings
from crewwell.core.security import get_current_user
from crewwell.db.models import Base, User
from crewwell.db.session import get_db
from crewwell.main import create_app
from crewwell.services.ai import FallbackWellnessAI

# In-memory database shared across the connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"

CREW_ID = uuid.UUID("123e4567-e89b-12d3-a456-426614174000")
SHORE_ID = uuid.UUID("223e4567-e89b-12d3-a456-426614174001")
MANAGER_ID = uuid.UUID("323e4567-e89b-12d3-a456-426614174002")


@pytest.fixture
def test_settings() -> Settings:
    """Settings with no AI key and no retry waits."""
    return Settings(
        APP_ENV="test",
        DATABASE_URL=TEST_DATABASE_URL,
        OPENAI_API_KEY=None,
        AI_RETRY_WAIT_SECONDS=0,
        JWT_SECRET="test-secret",
    )


@pytest.fixture
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new database session for a test, seeded with a small crew."""
    SessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with SessionLocal() as session:
        session.add_all([
            User(id=CREW_ID, name="Ana Costa", email="ana@crewwell.test", employee_id="E-100",
                 role="employee", vessel="MV Aurora", department="Deck"),
            User(id=SHORE_ID, name="Ben Okafor", email="ben@crewwell.test", employee_id="E-200",
                 role="employee", vessel=None, department="Operations"),
            User(id=MANAGER_ID, name="Mia Lund", email="mia@crewwell.test", employee_id="M-1",
                 role="management", vessel=None, department="HR"),
        ])
        await session.commit()
        yield session


@pytest.fixture
async def crew_member(db_session) -> User:
    return await db_session.get(User, CREW_ID)


@pytest.fixture
async def shore_employee(db_session) -> User:
    return await db_session.get(User, SHORE_ID)


@pytest.fixture
async def manager(db_session) -> User:
    return await db_session.get(User, MANAGER_ID)


@pytest.fixture
def auth_state() -> dict:
    """Who the test client is authenticated as; tests may switch it."""
    return {"user_id": str(CREW_ID)}


@pytest.fixture
async def client(db_session, auth_state, test_settings) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with mocked authentication and the deterministic AI backend."""
    app = create_app(test_settings)

    async def override_get_db():
        yield db_session

    async def override_auth():
        return {"user_id": auth_state["user_id"]}

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_auth
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_wellness_ai] = FallbackWellnessAI

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def morning() -> datetime:
    return datetime(2026, 3, 10, 9, 30)


@pytest.fixture
def completion():
    """Build a chat-completions payload carrying `content`."""
    def build(content: str) -> dict:
        return {
            "id": "chatcmpl-test123",
            "object": "chat.completion",
            "created": 1234567890,
            "model": "gpt-4o-mini",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ],
            "usage": {"prompt_tokens": 50, "completion_tokens": 20, "total_tokens": 70},
        }
    return build
