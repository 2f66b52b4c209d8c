"""
Pytest configuration and fixtures for Chatbot Studio backend tests.
"""
import os
import tempfile
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Set test environment before importing app modules
os.environ["TESTING"] = "true"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-access-secret-key-for-testing-only-0001"
os.environ["JWT_REFRESH_SECRET_KEY"] = "test-refresh-secret-key-for-testing-only-0002"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["EMAIL_ENABLED"] = "false"
os.environ["CHAT_ANALYTICS_ENABLED"] = "true"
os.environ["STORAGE_PATH"] = tempfile.mkdtemp(prefix="chatbot-studio-tests-")

from chatbot_studio.core.database import Base, get_db
from chatbot_studio.models import (
    Bot,
    FAQ,
    Intent,
    User,
    UserRole,
)
from chatbot_studio.services.auth_service import AuthService

USER_PASSWORD = "testpassword123"


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine with SQLite in-memory."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def app(test_engine, db_session) -> FastAPI:
    """Create test FastAPI application."""
    from chatbot_studio.main import app as main_app

    # Override database dependency
    async def override_get_db():
        yield db_session

    main_app.dependency_overrides[get_db] = override_get_db

    yield main_app

    main_app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# Model Fixtures
# =============================================================================

async def _create_user(
    db_session: AsyncSession,
    email: str,
    name: str,
    role: UserRole = UserRole.USER,
) -> User:
    user = User(
        email=email,
        password_hash=AuthService.hash_password(USER_PASSWORD),
        name=name,
        role=role,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def user(db_session: AsyncSession) -> User:
    """Create test user."""
    return await _create_user(db_session, "test@example.com", "Test User")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    """Create a second user who owns nothing of the first user's."""
    return await _create_user(db_session, "other@example.com", "Other User")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create test admin."""
    return await _create_user(db_session, "admin@example.com", "Admin", UserRole.ADMIN)


@pytest_asyncio.fixture
async def bot(db_session: AsyncSession, user: User) -> Bot:
    """Create a published test bot."""
    bot = Bot(
        user_id=user.id,
        name="Support Bot",
        welcome_message="Hi! Ask me anything.",
        published=True,
    )
    db_session.add(bot)
    await db_session.commit()
    await db_session.refresh(bot)
    return bot


@pytest_asyncio.fixture
async def unpublished_bot(db_session: AsyncSession, user: User) -> Bot:
    """Create a draft test bot."""
    bot = Bot(
        user_id=user.id,
        name="Draft Bot",
        published=False,
    )
    db_session.add(bot)
    await db_session.commit()
    await db_session.refresh(bot)
    return bot


@pytest_asyncio.fixture
async def other_bot(db_session: AsyncSession, other_user: User) -> Bot:
    """Create a published bot owned by the other user."""
    bot = Bot(
        user_id=other_user.id,
        name="Someone Else's Bot",
        published=True,
    )
    db_session.add(bot)
    await db_session.commit()
    await db_session.refresh(bot)
    return bot


@pytest_asyncio.fixture
async def greeting_intent(db_session: AsyncSession, bot: Bot) -> Intent:
    """Create an intent answering greetings."""
    intent = Intent(
        bot_id=bot.id,
        name="greeting",
        patterns=["hello", "hi there"],
        response="Hello from the intent!",
    )
    db_session.add(intent)
    await db_session.commit()
    await db_session.refresh(intent)
    return intent


@pytest_asyncio.fixture
async def pricing_faq(db_session: AsyncSession, bot: Bot) -> FAQ:
    """Create an FAQ about pricing."""
    faq = FAQ(
        bot_id=bot.id,
        question="pricing",
        answer="Plans start at $10.",
    )
    db_session.add(faq)
    await db_session.commit()
    await db_session.refresh(faq)
    return faq


# =============================================================================
# Authentication Fixtures
# =============================================================================

async def _login(client: AsyncClient, email: str) -> dict:
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": USER_PASSWORD},
    )
    assert response.status_code == 200
    token = response.json()["tokens"]["accessToken"]
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def auth_headers(client: AsyncClient, user: User) -> dict:
    """Get authentication headers for test user."""
    return await _login(client, user.email)


@pytest_asyncio.fixture
async def other_auth_headers(client: AsyncClient, other_user: User) -> dict:
    """Get authentication headers for the other user."""
    return await _login(client, other_user.email)


@pytest_asyncio.fixture
async def admin_headers(client: AsyncClient, admin_user: User) -> dict:
    """Get authentication headers for admin."""
    return await _login(client, admin_user.email)


# =============================================================================
# Mock Fixtures
# =============================================================================

@pytest.fixture
def mock_email():
    """Capture queued emails instead of dispatching them."""
    from unittest.mock import patch

    with patch("chatbot_studio.services.email_service.EmailService.dispatch") as mock:
        mock.return_value = True
        yield mock
