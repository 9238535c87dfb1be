"""
Fixtures for integration tests.

Provides:
- Test client for FastAPI app
- Mock payment processor that keeps real Stripe signature verification
- In-memory database for testing
"""

import uuid
from typing import AsyncGenerator, Dict, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from credit_builder.main import app
from credit_builder.core.dependencies import (
    get_payment_processor,
    get_plan_repository,
    get_processor_event_repository,
    get_scheduled_payment_repository,
    get_transaction_repository,
)
from credit_builder.domain.entities import PaymentCorrelation, PaymentIntent
from credit_builder.domain.exceptions import (
    PaymentProcessorException,
    PaymentProcessorTimeoutException,
)
from credit_builder.infrastructure.clients import StripePaymentProcessorClient
from credit_builder.infrastructure.database import Base
from credit_builder.infrastructure.repositories import (
    PostgresPlanRepository,
    PostgresProcessorEventRepository,
    PostgresScheduledPaymentRepository,
    PostgresTransactionRepository,
)
from .helpers import PUBLISHABLE_KEY, WEBHOOK_SECRET, user_headers


# =============================================================================
# Mock Clients
# =============================================================================

class MockPaymentProcessorClient(StripePaymentProcessorClient):
    """
    Stripe client whose API calls are served from memory.

    Webhook verification is inherited unchanged, so deliveries in tests go
    through real signature checks.
    """

    def __init__(self, fail_mode: bool = False, timeout_mode: bool = False):
        super().__init__(
            secret_key="sk_test_123",
            publishable_key=PUBLISHABLE_KEY,
            webhook_secret=WEBHOOK_SECRET,
        )
        self.fail_mode = fail_mode
        self.timeout_mode = timeout_mode
        self.intents: Dict[str, PaymentIntent] = {}
        self.call_count = 0

    async def create_payment_intent(
        self,
        amount_cents: int,
        correlation: PaymentCorrelation,
    ) -> PaymentIntent:
        self.call_count += 1

        if self.timeout_mode:
            raise PaymentProcessorTimeoutException()
        if self.fail_mode:
            raise PaymentProcessorException(
                message="Payment processor error: card_declined",
                status_code=402,
            )

        intent_id = f"pi_{uuid.uuid4().hex[:24]}"
        intent = PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_test",
            amount_cents=amount_cents,
            currency="usd",
            status="requires_payment_method",
            metadata=correlation.to_metadata(),
        )
        self.intents[intent_id] = intent
        return intent

    async def retrieve_payment_intent(self, payment_intent_id: str) -> Optional[PaymentIntent]:
        return self.intents.get(payment_intent_id)

    def mark_succeeded(self, payment_intent_id: str) -> None:
        """Simulate the paying party completing the payment."""
        intent = self.intents[payment_intent_id]
        self.intents[payment_intent_id] = PaymentIntent(
            id=intent.id,
            client_secret=intent.client_secret,
            amount_cents=intent.amount_cents,
            currency=intent.currency,
            status="succeeded",
            metadata=intent.metadata,
        )


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite defers BEGIN on its own; SAVEPOINTs need explicit transactions
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


# =============================================================================
# Mock Client Fixtures
# =============================================================================

@pytest.fixture
def mock_processor() -> MockPaymentProcessorClient:
    """Create a mock payment processor."""
    return MockPaymentProcessorClient()


@pytest.fixture
def timeout_processor() -> MockPaymentProcessorClient:
    """Create a payment processor that always times out."""
    return MockPaymentProcessorClient(timeout_mode=True)


# =============================================================================
# App Client Fixtures
# =============================================================================

def _override_dependencies(session: AsyncSession, processor: StripePaymentProcessorClient) -> None:
    async def override_get_plan_repository():
        return PostgresPlanRepository(session)

    async def override_get_scheduled_payment_repository():
        return PostgresScheduledPaymentRepository(session)

    async def override_get_transaction_repository():
        return PostgresTransactionRepository(session)

    async def override_get_processor_event_repository():
        return PostgresProcessorEventRepository(session)

    def override_get_payment_processor():
        return processor

    app.dependency_overrides[get_plan_repository] = override_get_plan_repository
    app.dependency_overrides[get_scheduled_payment_repository] = (
        override_get_scheduled_payment_repository
    )
    app.dependency_overrides[get_transaction_repository] = override_get_transaction_repository
    app.dependency_overrides[get_processor_event_repository] = (
        override_get_processor_event_repository
    )
    app.dependency_overrides[get_payment_processor] = override_get_payment_processor


@pytest_asyncio.fixture
async def client(
    test_session: AsyncSession,
    mock_processor: MockPaymentProcessorClient,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with mocked dependencies.

    This client:
    - Uses an in-memory SQLite database
    - Serves processor API calls from memory
    - Verifies webhooks with WEBHOOK_SECRET
    """
    _override_dependencies(test_session, mock_processor)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client_with_timeout_processor(
    test_session: AsyncSession,
    timeout_processor: MockPaymentProcessorClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client where the processor always times out."""
    _override_dependencies(test_session, timeout_processor)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def plan_request() -> dict:
    """Request body for a 12-month plan."""
    return {
        "name": "Credit Builder 12",
        "total_amount_cents": 50000,
        "term_months": 12,
        "start_date": "2025-01-15",
        "autopay_enabled": False,
    }


@pytest_asyncio.fixture
async def plan(client: AsyncClient, plan_request: dict) -> dict:
    """A 12-month plan owned by user_a."""
    response = await client.post("/v1/plans", json=plan_request, headers=user_headers("user_a"))
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def short_plan(client: AsyncClient) -> dict:
    """A 3-month plan owned by user_a."""
    response = await client.post(
        "/v1/plans",
        json={
            "name": "Starter",
            "total_amount_cents": 300,
            "term_months": 3,
            "start_date": "2025-03-01",
        },
        headers=user_headers("user_a"),
    )
    assert response.status_code == 201
    return response.json()
