"""API endpoints for credit-builder plans and their scheduled payments."""

from dataclasses import asdict
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query

from credit_builder.application.dto import (
    CreatePlanRequest,
    PlanResponse,
    UpdatePlanRequest,
)
from credit_builder.application.services import PlanService
from credit_builder.core.dependencies import get_current_user_id, get_plan_service
from credit_builder.presentation.schemas import (
    CreatePlanRequestSchema,
    ErrorResponseSchema,
    PlanListResponseSchema,
    PlanResponseSchema,
    ScheduledPaymentListResponseSchema,
    ScheduledPaymentSchema,
    UpdatePlanRequestSchema,
)

plan_router = APIRouter(
    prefix="/plans",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Not authenticated"},
    },
)

scheduled_payment_router = APIRouter(
    prefix="/scheduled-payments",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Not authenticated"},
    },
)


def _to_schema(response: PlanResponse) -> PlanResponseSchema:
    return PlanResponseSchema.model_validate(asdict(response))


@plan_router.post(
    "",
    response_model=PlanResponseSchema,
    status_code=201,
    summary="Create Credit Builder Plan",
    description="""
    Create a plan and its full monthly schedule in one transaction.

    Installments are ceil(total / term) with the last one adjusted so the
    schedule sums exactly to the total.
    """,
    responses={
        201: {"description": "Plan created"},
        400: {"model": ErrorResponseSchema, "description": "Invalid plan parameters"},
    },
)
async def create_plan(
    request: CreatePlanRequestSchema,
    user_id: Annotated[str, Depends(get_current_user_id)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PlanResponseSchema:
    dto = CreatePlanRequest(
        user_id=user_id,
        name=request.name,
        total_amount_cents=request.total_amount_cents,
        term_months=request.term_months,
        start_date=request.start_date,
        autopay_enabled=request.autopay_enabled,
    )

    response = await plan_service.create_plan(dto)

    return _to_schema(response)


@plan_router.get(
    "",
    response_model=PlanListResponseSchema,
    summary="List Plans",
)
async def list_plans(
    user_id: Annotated[str, Depends(get_current_user_id)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PlanListResponseSchema:
    plans = await plan_service.get_plans_by_user(user_id)

    return PlanListResponseSchema(plans=[_to_schema(plan) for plan in plans])


@plan_router.get(
    "/{plan_id}",
    response_model=PlanResponseSchema,
    summary="Get Plan",
    description="""
    Retrieve a plan by its ID.

    Returns the plan details including all scheduled payments with
    their due dates, amounts, and current status.
    """,
    responses={
        200: {"description": "Plan retrieved successfully"},
        404: {"model": ErrorResponseSchema, "description": "Plan not found"},
    },
)
async def get_plan(
    plan_id: Annotated[
        UUID,
        Path(description="UUID of the plan to retrieve"),
    ],
    user_id: Annotated[str, Depends(get_current_user_id)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PlanResponseSchema:
    response = await plan_service.get_plan(plan_id, user_id)

    return _to_schema(response)


@plan_router.patch(
    "/{plan_id}",
    response_model=PlanResponseSchema,
    summary="Update Plan",
    description="Toggle autopay or cancel an active plan.",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Change not allowed"},
        404: {"model": ErrorResponseSchema, "description": "Plan not found"},
    },
)
async def update_plan(
    plan_id: Annotated[
        UUID,
        Path(description="UUID of the plan to update"),
    ],
    request: UpdatePlanRequestSchema,
    user_id: Annotated[str, Depends(get_current_user_id)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PlanResponseSchema:
    dto = UpdatePlanRequest(
        user_id=user_id,
        plan_id=plan_id,
        autopay_enabled=request.autopay_enabled,
        status=request.status,
    )

    response = await plan_service.update_plan(dto)

    return _to_schema(response)


@scheduled_payment_router.get(
    "",
    response_model=ScheduledPaymentListResponseSchema,
    summary="List Scheduled Payments",
    description="""
    List the user's scheduled payments ordered by due date, optionally
    limited to one plan. Statuses change only when the payment processor
    confirms an outcome.
    """,
)
async def list_scheduled_payments(
    user_id: Annotated[str, Depends(get_current_user_id)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
    plan_id: Annotated[
        Optional[UUID],
        Query(description="Only return payments for this plan"),
    ] = None,
) -> ScheduledPaymentListResponseSchema:
    payments = await plan_service.get_scheduled_payments(user_id, plan_id=plan_id)

    return ScheduledPaymentListResponseSchema(
        scheduled_payments=[
            ScheduledPaymentSchema.model_validate(asdict(payment))
            for payment in payments
        ],
    )
