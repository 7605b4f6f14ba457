"""
Pytest configuration and shared fixtures for backend tests.
"""

import sys
from pathlib import Path

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest
from typing import AsyncGenerator
from unittest.mock import AsyncMock
from uuid import uuid4

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Import after path is set
from adapters.ai.openai_adapter import OpenAIContentService
from core.interfaces.services import (
    ArticleResult,
    KeywordResult,
    MetaDescriptionResult,
    ModelsResult,
    QualityResult,
)
from core.pricing import CostEstimator
from core.security import TokenService
from infrastructure.config import DEFAULT_MODEL_PRICING, get_settings
from infrastructure.database.connection import enable_sqlite_savepoints, get_db
from infrastructure.database.models import Base, User

settings = get_settings()
token_service = TokenService(
    secret_key=settings.jwt_secret_key,
    algorithm=settings.jwt_algorithm,
)


# Database URL for testing (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

STUB_ARTICLE_BODY = "# Benefits of Daily Exercise\n\nExercise keeps you healthy and happy."


@pytest.fixture
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine.sync_engine)

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


async def _create_user(db_session: AsyncSession, email: str, name: str) -> User:
    user = User(
        id=str(uuid4()),
        email=email,
        name=name,
        status="active",
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user."""
    return await _create_user(db_session, "test@example.com", "Test User")


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second account, for ownership checks."""
    return await _create_user(db_session, "other@example.com", "Other User")


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user."""
    access_token = token_service.create_access_token(user_id=test_user.id)
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    access_token = token_service.create_access_token(user_id=other_user.id)
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
def mock_ai_service() -> OpenAIContentService:
    """Generation client without an API key, so every call returns mock output."""
    return OpenAIContentService(api_key="", models_cache_ttl=3600)


class StubGenerationClient:
    """Stands in for the generation client; every call is an AsyncMock with a canned result."""

    def __init__(self):
        self.generate_article = AsyncMock(
            return_value=ArticleResult(
                content=STUB_ARTICLE_BODY, tokens_used=2000, model="gpt-4-turbo-preview"
            )
        )
        self.generate_meta_description = AsyncMock(
            return_value=MetaDescriptionResult(
                meta_description="Why moving every day matters.", length=29, tokens_used=50
            )
        )
        self.extract_keywords = AsyncMock(
            return_value=KeywordResult(keywords=["exercise", "health"], count=2, tokens_used=40)
        )
        self.analyze_quality = AsyncMock(
            return_value=QualityResult(analysis="Score: 8/10", tokens_used=300)
        )
        self.get_available_models = AsyncMock(return_value=ModelsResult())


@pytest.fixture
def stub_ai_client() -> StubGenerationClient:
    return StubGenerationClient()


@pytest.fixture
def cost_estimator() -> CostEstimator:
    return CostEstimator(pricing=DEFAULT_MODEL_PRICING, default_model="gpt-4-turbo-preview")


@pytest.fixture
async def async_client(
    db_session: AsyncSession, mock_ai_service: OpenAIContentService
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    # Import app here to avoid circular imports
    from api.dependencies import get_ai_service
    from main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_service] = lambda: mock_ai_service

    # Reset rate limiter state between tests to prevent cross-test 429s
    if hasattr(app.state, "limiter"):
        try:
            app.state.limiter.reset()
        except Exception:
            pass

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
