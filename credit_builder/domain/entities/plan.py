"""Credit-builder plan and scheduled payment domain entities."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import FrozenSet, List, Optional
from uuid import UUID, uuid4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlanStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DEFAULTED = "defaulted"


class ScheduledPaymentStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    LATE = "late"
    FAILED = "failed"


# Statuses a scheduled payment may move *from* to reach each target.
# COMPLETED is terminal: nothing moves out of it.
_ALLOWED_SOURCES = {
    ScheduledPaymentStatus.COMPLETED: frozenset(
        {
            ScheduledPaymentStatus.SCHEDULED,
            ScheduledPaymentStatus.LATE,
            ScheduledPaymentStatus.FAILED,
        }
    ),
    ScheduledPaymentStatus.FAILED: frozenset(
        {
            ScheduledPaymentStatus.SCHEDULED,
            ScheduledPaymentStatus.LATE,
        }
    ),
}


def allowed_sources(target: ScheduledPaymentStatus) -> FrozenSet[ScheduledPaymentStatus]:
    """Return the statuses from which a payment may transition to `target`."""
    return _ALLOWED_SOURCES.get(target, frozenset())


@dataclass(frozen=True)
class ScheduledPaymentPatch:
    """
    Conditional status change for a scheduled payment.

    The change is applied only while the stored status is one of
    `expected_statuses`, which makes it a compare-and-swap rather than an
    overwrite.
    """

    status: ScheduledPaymentStatus
    expected_statuses: FrozenSet[ScheduledPaymentStatus]
    paid_at: Optional[datetime] = None

    @classmethod
    def to_status(
        cls,
        status: ScheduledPaymentStatus,
        paid_at: Optional[datetime] = None,
    ) -> "ScheduledPaymentPatch":
        return cls(
            status=status,
            expected_statuses=allowed_sources(status),
            paid_at=paid_at,
        )


@dataclass
class ScheduledPayment:
    """A single installment of a credit-builder plan."""

    plan_id: UUID
    user_id: str
    installment_number: int
    due_date: date
    amount_cents: int
    id: UUID = field(default_factory=uuid4)
    status: ScheduledPaymentStatus = ScheduledPaymentStatus.SCHEDULED
    paid_at: Optional[datetime] = None

    @property
    def is_paid(self) -> bool:
        return self.status == ScheduledPaymentStatus.COMPLETED


@dataclass(frozen=True)
class PlanPatch:
    """User-editable plan fields. None means unchanged."""

    autopay_enabled: Optional[bool] = None
    status: Optional[PlanStatus] = None


@dataclass
class CreditPlan:
    """A credit-builder plan paid in monthly installments."""

    user_id: str
    name: str
    total_amount_cents: int
    monthly_amount_cents: int
    term_months: int
    start_date: date
    status: PlanStatus = PlanStatus.ACTIVE
    autopay_enabled: bool = False
    scheduled_payments: List[ScheduledPayment] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == PlanStatus.ACTIVE

    @property
    def paid_amount_cents(self) -> int:
        return sum(p.amount_cents for p in self.scheduled_payments if p.is_paid)

    @property
    def remaining_amount_cents(self) -> int:
        return self.total_amount_cents - self.paid_amount_cents

    @property
    def next_payment(self) -> Optional[ScheduledPayment]:
        """Earliest installment that has not been paid yet."""
        pending = [p for p in self.scheduled_payments if not p.is_paid]
        return min(pending, key=lambda p: p.due_date) if pending else None
