"""Data transfer objects for credit-builder plan operations."""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional
from uuid import UUID

from credit_builder.domain.entities import CreditPlan, PlanStatus, ScheduledPayment
from credit_builder.service.schedule import parse_start_date, validate_plan_terms

MAX_PLAN_NAME_LENGTH = 255


@dataclass(frozen=True)
class CreatePlanRequest:
    """Input data for creating a plan and its schedule."""

    user_id: str
    name: str
    total_amount_cents: int
    term_months: int
    start_date: date | str
    autopay_enabled: bool = False

    def validate(self) -> List[str]:
        errors = []

        if not self.user_id or not self.user_id.strip():
            errors.append("user_id is required")

        if not self.name or not self.name.strip():
            errors.append("name is required")
        elif len(self.name) > MAX_PLAN_NAME_LENGTH:
            errors.append(f"name must be at most {MAX_PLAN_NAME_LENGTH} characters")

        errors.extend(validate_plan_terms(self.total_amount_cents, self.term_months))

        try:
            parse_start_date(self.start_date)
        except (TypeError, ValueError):
            errors.append("start_date must be a valid ISO 8601 date")

        return errors

    @property
    def parsed_start_date(self) -> date:
        return parse_start_date(self.start_date)


@dataclass(frozen=True)
class UpdatePlanRequest:
    """Input data for user-initiated plan changes."""

    user_id: str
    plan_id: UUID
    autopay_enabled: Optional[bool] = None
    status: Optional[str] = None

    def validate(self) -> List[str]:
        errors = []

        if self.autopay_enabled is None and self.status is None:
            errors.append("at least one of autopay_enabled or status is required")

        if self.status is not None and self.status != PlanStatus.CANCELLED.value:
            errors.append("status can only be changed to 'cancelled'")

        return errors


@dataclass(frozen=True)
class ScheduledPaymentDTO:
    """Single installment within a plan response."""

    scheduled_payment_id: str
    plan_id: str
    installment_number: int
    due_date: str
    amount_cents: int
    status: str
    paid_at: Optional[str]

    @classmethod
    def from_entity(cls, payment: ScheduledPayment) -> "ScheduledPaymentDTO":
        return cls(
            scheduled_payment_id=str(payment.id),
            plan_id=str(payment.plan_id),
            installment_number=payment.installment_number,
            due_date=payment.due_date.isoformat(),
            amount_cents=payment.amount_cents,
            status=payment.status.value,
            paid_at=payment.paid_at.isoformat() if payment.paid_at else None,
        )


@dataclass(frozen=True)
class PlanResponse:
    """Response data for a plan with its scheduled payments."""

    plan_id: str
    user_id: str
    name: str
    total_amount_cents: int
    monthly_amount_cents: int
    term_months: int
    start_date: str
    status: str
    autopay_enabled: bool
    paid_amount_cents: int
    remaining_amount_cents: int
    next_payment: Optional[ScheduledPaymentDTO]
    scheduled_payments: List[ScheduledPaymentDTO]

    @classmethod
    def from_entity(cls, plan: CreditPlan) -> "PlanResponse":
        next_payment = plan.next_payment
        return cls(
            plan_id=str(plan.id),
            user_id=plan.user_id,
            name=plan.name,
            total_amount_cents=plan.total_amount_cents,
            monthly_amount_cents=plan.monthly_amount_cents,
            term_months=plan.term_months,
            start_date=plan.start_date.isoformat(),
            status=plan.status.value,
            autopay_enabled=plan.autopay_enabled,
            paid_amount_cents=plan.paid_amount_cents,
            remaining_amount_cents=plan.remaining_amount_cents,
            next_payment=(
                ScheduledPaymentDTO.from_entity(next_payment) if next_payment else None
            ),
            scheduled_payments=[
                ScheduledPaymentDTO.from_entity(payment)
                for payment in plan.scheduled_payments
            ],
        )
