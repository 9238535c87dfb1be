"""Payment intent and ledger Pydantic schemas."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PaymentConfigResponseSchema(BaseModel):
    """Schema for GET /v1/payments/config response."""

    publishable_key: str = Field(
        ...,
        description="Processor key for the client-side payment form",
    )


class CreatePaymentIntentRequestSchema(BaseModel):
    """Schema for POST /v1/payments/intents request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "amount_cents": 4167,
                    "plan_id": "550e8400-e29b-41d4-a716-446655440000",
                    "scheduled_payment_id": "6ba7b810-9dad-11d1-80b4-00c04fd430c8",
                }
            ]
        }
    )
    amount_cents: int = Field(
        ...,
        gt=0,
        description="Amount to collect in cents",
        examples=[4167],
    )
    plan_id: Optional[UUID] = Field(
        None,
        description="Plan the payment is for",
    )
    scheduled_payment_id: Optional[UUID] = Field(
        None,
        description="Installment the payment settles",
    )


class PaymentIntentResponseSchema(BaseModel):
    """Schema for POST /v1/payments/intents response."""

    payment_intent_id: str
    client_secret: str = Field(
        ...,
        description="Opaque secret for completing payment on the client",
    )
    amount_cents: int
    currency: str = Field(..., examples=["usd"])


class PaymentStatusRequestSchema(BaseModel):
    """Schema for POST /v1/payments/confirm request body."""

    payment_intent_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        examples=["pi_3MtwBwLkdIwHu7ix28a3tqPa"],
    )


class PaymentStatusResponseSchema(BaseModel):
    """
    Schema for POST /v1/payments/confirm response.

    Reports the processor's status only. Local state changes when the
    processor's webhook arrives.
    """

    payment_intent_id: str
    status: str = Field(..., examples=["succeeded"])
    amount_cents: int
    plan_id: Optional[str] = None
    scheduled_payment_id: Optional[str] = None


class TransactionSchema(BaseModel):
    """Schema for a ledger transaction."""

    transaction_id: str
    plan_id: Optional[str] = None
    type: str = Field(..., examples=["payment"])
    amount_cents: int
    external_id: str = Field(
        ...,
        description="Processor reference (payment intent id)",
    )
    status: str
    description: str
    created_at: str


class TransactionListResponseSchema(BaseModel):
    """Schema for GET /v1/transactions response."""

    transactions: list[TransactionSchema]
