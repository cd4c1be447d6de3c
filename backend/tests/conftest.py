"""Shared test fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("OPENROUTER_API_KEY", "test-key")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from datetime import date, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace
import uuid

from subbase.config import Settings
from subbase.database import Base, get_db
from subbase.dependencies import get_insights_generator
from subbase.main import app
from subbase.models.subscription import Subscription, BillingCycle, SubscriptionStatus

USER_ID = "11111111-1111-4111-8111-111111111111"
OTHER_USER_ID = "22222222-2222-4222-8222-222222222222"


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test using in-memory SQLite."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"X-User-Id": USER_ID}


@pytest.fixture
def ai_settings():
    """Settings with a fast, deterministic retry policy."""
    return Settings(
        _env_file=None,
        openrouter_api_key="test-key",
        ai_max_attempts=3,
        ai_retry_base_delay=1.0,
        ai_timeout_seconds=30.0,
        ai_insights_mode="structured",
    )


@pytest.fixture
def make_subscription(db_session):
    """Factory persisting a subscription; later calls get later created_at values."""
    created = []

    def _make(
        name="Netflix",
        cost="43.00",
        billing_cycle=BillingCycle.monthly,
        status=SubscriptionStatus.active,
        currency="PLN",
        user_id=USER_ID,
        description=None,
    ):
        subscription = Subscription(
            id=str(uuid.uuid4()),
            user_id=user_id,
            name=name,
            cost=Decimal(cost),
            currency=currency,
            billing_cycle=billing_cycle,
            status=status,
            start_date=date(2024, 1, 15),
            description=description,
            created_at=datetime(2024, 1, 1) + timedelta(minutes=len(created)),
        )
        db_session.add(subscription)
        db_session.commit()
        db_session.refresh(subscription)
        created.append(subscription)
        return subscription

    return _make


def make_completion_response(content, finish_reason="stop"):
    """Minimal stand-in for a chat-completion response object."""
    return SimpleNamespace(
        model="openai/gpt-4o-mini",
        choices=[
            SimpleNamespace(
                message=SimpleNamespace(role="assistant", content=content),
                finish_reason=finish_reason,
                index=0,
            )
        ],
        usage=SimpleNamespace(prompt_tokens=120, completion_tokens=80, total_tokens=200),
    )


class FakeCompletion:
    """Scripted replacement for litellm.acompletion.

    Each call pops the next outcome: exceptions are raised, anything else is
    returned as the response.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def __call__(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class RecordingSleep:
    """Replacement for asyncio.sleep that records delays instead of waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.fixture
def override_insights_generator():
    """Install a specific InsightsGenerator for API tests."""
    def _install(generator):
        app.dependency_overrides[get_insights_generator] = lambda: generator
    return _install
