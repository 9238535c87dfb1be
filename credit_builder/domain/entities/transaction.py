"""Transaction entity representing an immutable ledger entry."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class TransactionType(str, Enum):
    """Type of money movement recorded in the ledger."""

    PAYMENT = "payment"


class TransactionStatus(str, Enum):
    COMPLETED = "completed"


@dataclass(frozen=True)
class Transaction:
    """
    Append-only ledger entry for a confirmed money movement.

    Attributes:
        user_id: Owner of the transaction
        type: Kind of movement
        amount_cents: Amount in minor currency units
        external_id: Processor reference (payment intent id), unique
        status: Settlement status reported by the processor
        description: Human-readable description
        plan_id: Plan the movement is attributed to, if any
    """

    user_id: str
    type: TransactionType
    amount_cents: int
    external_id: str
    status: TransactionStatus = TransactionStatus.COMPLETED
    description: str = ""
    plan_id: Optional[UUID] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
