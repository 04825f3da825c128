"""
Test Configuration and Fixtures
Provides shared test setup for all test cases
"""
import os

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("MAIL_SUPPRESS_SEND", "true")

import uuid
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from homesphere.database.connection import Base, get_db
from homesphere.main import app
from homesphere.models.agent import Agent
from homesphere.models.enums import PropertyStatus, PropertyType, ReviewStatus, UserRole, VerificationStatus
from homesphere.models.property import Property
from homesphere.models.review import Review
from homesphere.models.user import User
from homesphere.services.auth_service import issue_token
from homesphere.utils.security import create_access_token, get_password_hash

# Test database URL (use in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "StrongPass123!"

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Create a fresh database for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def sent_emails():
    """Every outgoing email is captured instead of sent"""
    with patch("homesphere.services.email_service.send_email", new_callable=AsyncMock) as mock_send:
        yield mock_send


@pytest_asyncio.fixture(scope="function")
async def client(db_session):
    """HTTP client whose requests share the test session"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def headers_for():
    """Bearer headers for a User, or for the account behind an Agent profile"""
    def _headers(account) -> dict:
        if isinstance(account, Agent):
            token = create_access_token({"sub": account.user_id, "role": UserRole.AGENT.value})
        else:
            token = issue_token(account)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def create_user(db_session):
    async def _create(role: UserRole = UserRole.USER, **overrides) -> User:
        fields = dict(
            id=str(uuid.uuid4()),
            email=f"user_{uuid.uuid4().hex[:10]}@example.com",
            hashed_password=get_password_hash(TEST_PASSWORD),
            first_name="Test",
            last_name="User",
            role=role,
            is_active=True,
            email_verified=True,
        )
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        await db_session.commit()
        return user
    return _create


@pytest.fixture
def create_agent(db_session, create_user):
    async def _create(
        status: VerificationStatus = VerificationStatus.APPROVED,
        first_name: str = "Ada",
        last_name: str = "Agent",
        **overrides,
    ) -> Agent:
        user = await create_user(UserRole.AGENT, first_name=first_name, last_name=last_name)
        fields = dict(
            user_id=user.id,
            registration_number=f"REG-{uuid.uuid4().hex[:8]}",
            verification_status=status,
            is_verified=status == VerificationStatus.APPROVED,
            specialties=[],
        )
        fields.update(overrides)
        agent = Agent(**fields)
        db_session.add(agent)
        await db_session.commit()
        return agent
    return _create


@pytest.fixture
def create_property(db_session):
    async def _create(agent: Agent, **overrides) -> Property:
        fields = dict(
            agent_id=agent.id,
            title="Family Home",
            description="A spacious family home close to schools",
            price=Decimal("100"),
            address="12 Marina Road",
            city="Lagos",
            state="Lagos",
            bedrooms=3,
            bathrooms=2,
            property_type=PropertyType.HOUSE,
            status=PropertyStatus.ACTIVE,
            images=[],
            features=[],
        )
        fields.update(overrides)
        prop = Property(**fields)
        db_session.add(prop)
        await db_session.commit()
        return prop
    return _create


@pytest.fixture
def create_review(db_session):
    async def _create(author: User, status: ReviewStatus = ReviewStatus.APPROVED, **overrides) -> Review:
        fields = dict(
            user_id=author.id,
            rating=5,
            comment="Great experience from start to finish",
            status=status,
        )
        fields.update(overrides)
        review = Review(**fields)
        db_session.add(review)
        await db_session.commit()
        return review
    return _create


@pytest_asyncio.fixture
async def user(create_user):
    return await create_user(first_name="Regular", last_name="Buyer")


@pytest_asyncio.fixture
async def admin(create_user):
    return await create_user(UserRole.ADMIN, first_name="Site", last_name="Admin")


@pytest_asyncio.fixture
async def agent(create_agent):
    return await create_agent()
