"""API endpoints for the client-side payment flow and the ledger."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from credit_builder.application.dto import CreatePaymentIntentRequest
from credit_builder.application.services import PaymentService
from credit_builder.core.dependencies import get_current_user_id, get_payment_service
from credit_builder.presentation.schemas import (
    CreatePaymentIntentRequestSchema,
    ErrorResponseSchema,
    PaymentConfigResponseSchema,
    PaymentIntentResponseSchema,
    PaymentStatusRequestSchema,
    PaymentStatusResponseSchema,
    TransactionListResponseSchema,
    TransactionSchema,
)

payment_router = APIRouter(
    prefix="/payments",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Not authenticated"},
        503: {"model": ErrorResponseSchema, "description": "Payment processor unavailable"},
    },
)

transaction_router = APIRouter(
    prefix="/transactions",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Not authenticated"},
    },
)


@payment_router.get(
    "/config",
    response_model=PaymentConfigResponseSchema,
    summary="Get Payment Config",
)
async def get_payment_config(
    user_id: Annotated[str, Depends(get_current_user_id)],
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> PaymentConfigResponseSchema:
    return PaymentConfigResponseSchema(
        publishable_key=payment_service.get_publishable_key(),
    )


@payment_router.post(
    "/intents",
    response_model=PaymentIntentResponseSchema,
    status_code=201,
    summary="Create Payment Intent",
    description="""
    Start a payment with the processor and return the client secret.

    This does not record a payment. The scheduled payment and ledger are
    updated only when the processor's signed webhook arrives.
    """,
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        404: {"model": ErrorResponseSchema, "description": "Plan or payment not found"},
    },
)
async def create_payment_intent(
    request: CreatePaymentIntentRequestSchema,
    user_id: Annotated[str, Depends(get_current_user_id)],
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> PaymentIntentResponseSchema:
    dto = CreatePaymentIntentRequest(
        user_id=user_id,
        amount_cents=request.amount_cents,
        plan_id=request.plan_id,
        scheduled_payment_id=request.scheduled_payment_id,
    )

    response = await payment_service.create_payment_intent(dto)

    return PaymentIntentResponseSchema.model_validate(asdict(response))


@payment_router.post(
    "/confirm",
    response_model=PaymentStatusResponseSchema,
    summary="Check Payment Status",
    description="""
    Report the processor's current status for an intent.

    Advisory only: a "succeeded" status here does not complete the
    scheduled payment. That happens when the webhook is processed.
    """,
    responses={
        404: {"model": ErrorResponseSchema, "description": "Payment intent not found"},
    },
)
async def confirm_payment(
    request: PaymentStatusRequestSchema,
    user_id: Annotated[str, Depends(get_current_user_id)],
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> PaymentStatusResponseSchema:
    response = await payment_service.get_payment_status(user_id, request.payment_intent_id)

    return PaymentStatusResponseSchema.model_validate(asdict(response))


@transaction_router.get(
    "",
    response_model=TransactionListResponseSchema,
    summary="List Transactions",
    description="Retrieve the user's ledger ordered by date (newest first).",
)
async def list_transactions(
    user_id: Annotated[str, Depends(get_current_user_id)],
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
    limit: Annotated[
        int,
        Query(ge=1, le=100, description="Maximum number of transactions to return"),
    ] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> TransactionListResponseSchema:
    transactions = await payment_service.get_transactions(user_id, limit=limit, offset=offset)

    return TransactionListResponseSchema(
        transactions=[
            TransactionSchema.model_validate(asdict(txn)) for txn in transactions
        ],
    )
