"""Plan service - plan creation, retrieval and user-initiated changes."""

from typing import List, Optional
from uuid import UUID

import structlog

from credit_builder.core.metrics import record_plan_created
from credit_builder.domain.entities import (
    CreditPlan,
    PlanPatch,
    PlanStatus,
    ScheduledPayment,
)
from credit_builder.domain.exceptions import (
    InvalidPlanRequestException,
    PlanNotFoundException,
)
from credit_builder.domain.interfaces import PlanRepository, ScheduledPaymentRepository
from credit_builder.application.dto import (
    CreatePlanRequest,
    PlanResponse,
    ScheduledPaymentDTO,
    UpdatePlanRequest,
)
from credit_builder.service.schedule import build_schedule, calculate_monthly_amount

logger = structlog.get_logger(__name__)


class PlanService:
    """
    Application service for credit-builder plan use cases.

    Scheduled payment statuses are never changed here; only the webhook
    processor moves them.
    """

    def __init__(
        self,
        plan_repository: PlanRepository,
        scheduled_payment_repository: ScheduledPaymentRepository,
    ):
        self._plan_repo = plan_repository
        self._payment_repo = scheduled_payment_repository

    async def create_plan(self, request: CreatePlanRequest) -> PlanResponse:
        """
        Create a plan and its full installment schedule.

        Args:
            request: Plan parameters

        Returns:
            PlanResponse with the generated scheduled payments

        Raises:
            InvalidPlanRequestException: If the parameters are invalid
        """
        errors = request.validate()
        if errors:
            logger.info("plan_request_rejected", user_id=request.user_id, errors=errors)
            raise InvalidPlanRequestException("; ".join(errors))

        plan = self._build_plan(request)
        await self._plan_repo.create_plan_with_schedule(plan)

        record_plan_created(plan.total_amount_cents)
        logger.info(
            "plan_created",
            plan_id=str(plan.id),
            user_id=plan.user_id,
            total_amount_cents=plan.total_amount_cents,
            term_months=plan.term_months,
            monthly_amount_cents=plan.monthly_amount_cents,
        )

        return PlanResponse.from_entity(plan)

    async def get_plan(self, plan_id: UUID, user_id: str) -> PlanResponse:
        """
        Retrieve a plan owned by the user.

        Raises:
            PlanNotFoundException: If the plan does not exist for this user
        """
        plan = await self._plan_repo.get_by_id(plan_id, user_id)

        if plan is None:
            logger.warning("plan_not_found", plan_id=str(plan_id), user_id=user_id)
            raise PlanNotFoundException(str(plan_id))

        return PlanResponse.from_entity(plan)

    async def get_plans_by_user(self, user_id: str) -> List[PlanResponse]:
        """Retrieve all plans for a user, newest first."""
        plans = await self._plan_repo.get_by_user_id(user_id)

        logger.info(
            "user_plans_retrieved",
            user_id=user_id,
            count=len(plans),
        )

        return [PlanResponse.from_entity(plan) for plan in plans]

    async def get_scheduled_payments(
        self,
        user_id: str,
        plan_id: Optional[UUID] = None,
    ) -> List[ScheduledPaymentDTO]:
        """Retrieve the user's scheduled payments, optionally for one plan."""
        payments = await self._payment_repo.get_by_user_id(user_id, plan_id=plan_id)
        return [ScheduledPaymentDTO.from_entity(payment) for payment in payments]

    async def update_plan(self, request: UpdatePlanRequest) -> PlanResponse:
        """
        Toggle autopay or cancel an active plan.

        Raises:
            InvalidPlanRequestException: If the change is not allowed
            PlanNotFoundException: If the plan does not exist for this user
        """
        errors = request.validate()
        if errors:
            raise InvalidPlanRequestException("; ".join(errors))

        plan = await self._plan_repo.get_by_id(request.plan_id, request.user_id)
        if plan is None:
            raise PlanNotFoundException(str(request.plan_id))

        if not plan.is_active:
            raise InvalidPlanRequestException(
                f"plan is {plan.status.value} and can no longer be changed"
            )

        patch = PlanPatch(
            autopay_enabled=request.autopay_enabled,
            status=PlanStatus(request.status) if request.status else None,
        )
        updated = await self._plan_repo.update_plan(plan.id, request.user_id, patch)
        if updated is None:
            raise PlanNotFoundException(str(request.plan_id))

        logger.info(
            "plan_updated",
            plan_id=str(plan.id),
            user_id=request.user_id,
            autopay_enabled=updated.autopay_enabled,
            status=updated.status.value,
        )

        return PlanResponse.from_entity(updated)

    def _build_plan(self, request: CreatePlanRequest) -> CreditPlan:
        """Build a plan entity with one scheduled payment per month of term."""
        plan = CreditPlan(
            user_id=request.user_id,
            name=request.name.strip(),
            total_amount_cents=request.total_amount_cents,
            monthly_amount_cents=calculate_monthly_amount(
                request.total_amount_cents, request.term_months
            ),
            term_months=request.term_months,
            start_date=request.parsed_start_date,
            autopay_enabled=request.autopay_enabled,
        )

        for entry in build_schedule(
            request.total_amount_cents,
            request.term_months,
            plan.start_date,
        ):
            plan.scheduled_payments.append(
                ScheduledPayment(
                    plan_id=plan.id,
                    user_id=plan.user_id,
                    installment_number=entry.installment_number,
                    due_date=entry.due_date,
                    amount_cents=entry.amount_cents,
                )
            )

        return plan
