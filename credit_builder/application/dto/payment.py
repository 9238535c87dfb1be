"""Data transfer objects for payment intent and ledger operations."""

from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from credit_builder.domain.entities import PaymentIntent, Transaction


@dataclass(frozen=True)
class CreatePaymentIntentRequest:
    """Input data for starting a payment."""

    user_id: str
    amount_cents: int
    plan_id: Optional[UUID] = None
    scheduled_payment_id: Optional[UUID] = None

    def validate(self) -> List[str]:
        errors = []

        if not self.user_id or not self.user_id.strip():
            errors.append("user_id is required")

        if isinstance(self.amount_cents, bool) or not isinstance(self.amount_cents, int):
            errors.append("amount_cents must be an integer")
        elif self.amount_cents <= 0:
            errors.append("amount_cents must be positive")

        return errors


@dataclass(frozen=True)
class PaymentIntentResponse:
    """Client-facing handle for an intent. Holds no settlement state."""

    payment_intent_id: str
    client_secret: str
    amount_cents: int
    currency: str

    @classmethod
    def from_entity(cls, intent: PaymentIntent) -> "PaymentIntentResponse":
        return cls(
            payment_intent_id=intent.id,
            client_secret=intent.client_secret or "",
            amount_cents=intent.amount_cents,
            currency=intent.currency,
        )


@dataclass(frozen=True)
class PaymentStatusResponse:
    """Processor-reported intent status, advisory only."""

    payment_intent_id: str
    status: str
    amount_cents: int
    plan_id: Optional[str]
    scheduled_payment_id: Optional[str]

    @classmethod
    def from_entity(cls, intent: PaymentIntent) -> "PaymentStatusResponse":
        correlation = intent.correlation
        return cls(
            payment_intent_id=intent.id,
            status=intent.status,
            amount_cents=intent.amount_cents,
            plan_id=str(correlation.plan_id) if correlation and correlation.plan_id else None,
            scheduled_payment_id=(
                str(correlation.scheduled_payment_id)
                if correlation and correlation.scheduled_payment_id
                else None
            ),
        )


@dataclass(frozen=True)
class TransactionDTO:
    """Ledger entry in listings."""

    transaction_id: str
    plan_id: Optional[str]
    type: str
    amount_cents: int
    external_id: str
    status: str
    description: str
    created_at: str

    @classmethod
    def from_entity(cls, transaction: Transaction) -> "TransactionDTO":
        return cls(
            transaction_id=str(transaction.id),
            plan_id=str(transaction.plan_id) if transaction.plan_id else None,
            type=transaction.type.value,
            amount_cents=transaction.amount_cents,
            external_id=transaction.external_id,
            status=transaction.status.value,
            description=transaction.description,
            created_at=transaction.created_at.isoformat(),
        )
