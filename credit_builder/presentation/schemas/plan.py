"""Plan-related Pydantic schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreatePlanRequestSchema(BaseModel):
    """Schema for POST /v1/plans request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "Credit Builder 12",
                    "total_amount_cents": 50000,
                    "term_months": 12,
                    "start_date": "2025-01-15",
                    "autopay_enabled": True,
                }
            ]
        }
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Display name of the plan",
        examples=["Credit Builder 12"],
    )
    total_amount_cents: int = Field(
        ...,
        gt=0,
        description="Total amount to be repaid in cents",
        examples=[50000],
    )
    term_months: int = Field(
        ...,
        gt=0,
        description="Number of monthly installments",
        examples=[12],
    )
    start_date: str = Field(
        ...,
        description=(
            "Plan start date (YYYY-MM-DD or ISO 8601 timestamp); "
            "the first installment is due on this date"
        ),
        examples=["2025-01-15"],
    )
    autopay_enabled: bool = Field(
        False,
        description="Whether installments are charged automatically",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Ensure name is not just whitespace."""
        if not v.strip():
            raise ValueError("name cannot be empty or whitespace")
        return v.strip()


class UpdatePlanRequestSchema(BaseModel):
    """Schema for PATCH /v1/plans/{plan_id} request body."""

    autopay_enabled: Optional[bool] = Field(
        None,
        description="Turn autopay on or off",
    )
    status: Optional[str] = Field(
        None,
        description="Only 'cancelled' is accepted",
        examples=["cancelled"],
    )


class ScheduledPaymentSchema(BaseModel):
    """Schema for a scheduled payment."""

    scheduled_payment_id: str = Field(
        ...,
        description="UUID of the scheduled payment",
    )
    plan_id: str = Field(
        ...,
        description="UUID of the owning plan",
    )
    installment_number: int = Field(
        ...,
        ge=1,
        description="1-based position in the schedule",
    )
    due_date: str = Field(
        ...,
        description="Due date in ISO 8601 format (YYYY-MM-DD)",
        examples=["2025-02-15"],
    )
    amount_cents: int = Field(
        ...,
        gt=0,
        description="Installment amount in cents",
        examples=[4167],
    )
    status: str = Field(
        ...,
        description="scheduled, completed, late or failed",
        examples=["scheduled"],
    )
    paid_at: Optional[str] = Field(
        None,
        description="When the processor confirmed payment",
    )


class PlanResponseSchema(BaseModel):
    """Schema for a plan with its schedule."""

    plan_id: str = Field(
        ...,
        description="UUID of the plan",
    )
    user_id: str = Field(
        ...,
        description="User who owns this plan",
    )
    name: str
    total_amount_cents: int = Field(
        ...,
        gt=0,
        description="Total amount to be repaid",
        examples=[50000],
    )
    monthly_amount_cents: int = Field(
        ...,
        gt=0,
        description="Regular monthly installment",
        examples=[4167],
    )
    term_months: int
    start_date: str
    status: str = Field(
        ...,
        description="active, completed, cancelled or defaulted",
        examples=["active"],
    )
    autopay_enabled: bool
    paid_amount_cents: int
    remaining_amount_cents: int
    next_payment: Optional[ScheduledPaymentSchema] = Field(
        None,
        description="Earliest unpaid installment; null once the plan is paid off",
    )
    scheduled_payments: list[ScheduledPaymentSchema] = Field(
        ...,
        description="Installments ordered by due date",
    )


class ScheduledPaymentListResponseSchema(BaseModel):
    """Schema for GET /v1/scheduled-payments response."""

    scheduled_payments: list[ScheduledPaymentSchema]


class PlanListResponseSchema(BaseModel):
    """Schema for GET /v1/plans response."""

    plans: list[PlanResponseSchema] = Field(
        ...,
        description="The user's plans, newest first",
    )
