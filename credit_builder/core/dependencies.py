"""Dependency injection for FastAPI."""

from typing import Annotated, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from credit_builder.domain.exceptions import UnauthenticatedException
from credit_builder.domain.interfaces import PaymentProcessorClient
from credit_builder.infrastructure.database import get_db_session
from credit_builder.infrastructure.repositories import (
    PostgresPlanRepository,
    PostgresProcessorEventRepository,
    PostgresScheduledPaymentRepository,
    PostgresTransactionRepository,
)
from credit_builder.infrastructure.clients import StripePaymentProcessorClient
from credit_builder.application.services import (
    PaymentService,
    PlanService,
    WebhookService,
)


# Authentication
async def get_current_user_id(
    x_user_id: Annotated[Optional[str], Header(alias="X-User-ID")] = None,
) -> str:
    """Get the authenticated user id set by the upstream session layer."""
    if x_user_id is None or not x_user_id.strip():
        raise UnauthenticatedException()
    return x_user_id.strip()


# Repository dependencies
async def get_plan_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresPlanRepository:
    """Get a PlanRepository instance."""
    return PostgresPlanRepository(session)


async def get_scheduled_payment_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresScheduledPaymentRepository:
    """Get a ScheduledPaymentRepository instance."""
    return PostgresScheduledPaymentRepository(session)


async def get_transaction_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresTransactionRepository:
    """Get a TransactionRepository instance."""
    return PostgresTransactionRepository(session)


async def get_processor_event_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresProcessorEventRepository:
    """Get a ProcessorEventRepository instance."""
    return PostgresProcessorEventRepository(session)


# External client dependencies
def get_payment_processor(request: Request) -> PaymentProcessorClient:
    """Get the shared payment processor client built at startup."""
    processor = getattr(request.app.state, "payment_processor", None)
    if processor is None:
        processor = StripePaymentProcessorClient()
        request.app.state.payment_processor = processor
    return processor


# Service dependencies
async def get_plan_service(
    plan_repo: Annotated[PostgresPlanRepository, Depends(get_plan_repository)],
    payment_repo: Annotated[
        PostgresScheduledPaymentRepository, Depends(get_scheduled_payment_repository)
    ],
) -> PlanService:
    """Get a PlanService instance."""
    return PlanService(
        plan_repository=plan_repo,
        scheduled_payment_repository=payment_repo,
    )


async def get_payment_service(
    processor: Annotated[PaymentProcessorClient, Depends(get_payment_processor)],
    plan_repo: Annotated[PostgresPlanRepository, Depends(get_plan_repository)],
    payment_repo: Annotated[
        PostgresScheduledPaymentRepository, Depends(get_scheduled_payment_repository)
    ],
    transaction_repo: Annotated[
        PostgresTransactionRepository, Depends(get_transaction_repository)
    ],
) -> PaymentService:
    """Get a PaymentService instance with all dependencies."""
    return PaymentService(
        processor=processor,
        plan_repository=plan_repo,
        scheduled_payment_repository=payment_repo,
        transaction_repository=transaction_repo,
    )


async def get_webhook_service(
    processor: Annotated[PaymentProcessorClient, Depends(get_payment_processor)],
    plan_repo: Annotated[PostgresPlanRepository, Depends(get_plan_repository)],
    payment_repo: Annotated[
        PostgresScheduledPaymentRepository, Depends(get_scheduled_payment_repository)
    ],
    transaction_repo: Annotated[
        PostgresTransactionRepository, Depends(get_transaction_repository)
    ],
    event_repo: Annotated[
        PostgresProcessorEventRepository, Depends(get_processor_event_repository)
    ],
) -> WebhookService:
    """Get a WebhookService instance with all dependencies."""
    return WebhookService(
        processor=processor,
        plan_repository=plan_repo,
        scheduled_payment_repository=payment_repo,
        transaction_repository=transaction_repo,
        event_repository=event_repo,
    )
