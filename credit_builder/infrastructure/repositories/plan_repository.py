"""PostgreSQL repository implementation for credit-builder plans."""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from credit_builder.domain.entities import (
    CreditPlan,
    PlanPatch,
    PlanStatus,
    ScheduledPaymentStatus,
)
from credit_builder.domain.interfaces import PlanRepository
from credit_builder.infrastructure.database.models import (
    CreditPlanModel,
    ScheduledPaymentModel,
)
from .scheduled_payment_repository import scheduled_payment_to_entity


class PostgresPlanRepository(PlanRepository):
    """PostgreSQL-backed plan repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create_plan_with_schedule(self, plan: CreditPlan) -> CreditPlan:
        model = CreditPlanModel(
            id=str(plan.id),
            user_id=plan.user_id,
            name=plan.name,
            total_amount_cents=plan.total_amount_cents,
            monthly_amount_cents=plan.monthly_amount_cents,
            term_months=plan.term_months,
            start_date=plan.start_date,
            status=plan.status.value,
            autopay_enabled=plan.autopay_enabled,
            created_at=plan.created_at,
            updated_at=plan.created_at,
        )

        for payment in plan.scheduled_payments:
            model.scheduled_payments.append(
                ScheduledPaymentModel(
                    id=str(payment.id),
                    plan_id=str(plan.id),
                    user_id=plan.user_id,
                    installment_number=payment.installment_number,
                    due_date=payment.due_date,
                    amount_cents=payment.amount_cents,
                    status=payment.status.value,
                    paid_at=payment.paid_at,
                )
            )

        # Plan and schedule go out in one flush inside the request transaction
        self._session.add(model)
        await self._session.flush()

        return plan

    async def get_by_id(self, plan_id: UUID, user_id: str) -> Optional[CreditPlan]:
        stmt = (
            select(CreditPlanModel)
            .options(selectinload(CreditPlanModel.scheduled_payments))
            .where(
                CreditPlanModel.id == str(plan_id),
                CreditPlanModel.user_id == user_id,
            )
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def get_by_user_id(self, user_id: str) -> List[CreditPlan]:
        stmt = (
            select(CreditPlanModel)
            .options(selectinload(CreditPlanModel.scheduled_payments))
            .where(CreditPlanModel.user_id == user_id)
            .order_by(CreditPlanModel.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [self._to_entity(model) for model in models]

    async def update_plan(
        self,
        plan_id: UUID,
        user_id: str,
        patch: PlanPatch,
    ) -> Optional[CreditPlan]:
        values = {"updated_at": datetime.now(timezone.utc)}
        if patch.autopay_enabled is not None:
            values["autopay_enabled"] = patch.autopay_enabled
        if patch.status is not None:
            values["status"] = patch.status.value

        stmt = (
            update(CreditPlanModel)
            .where(
                CreditPlanModel.id == str(plan_id),
                CreditPlanModel.user_id == user_id,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)

        if result.rowcount == 0:
            return None

        return await self.get_by_id(plan_id, user_id)

    async def complete_if_settled(self, plan_id: UUID, user_id: str) -> bool:
        outstanding = (
            select(ScheduledPaymentModel.id)
            .where(
                ScheduledPaymentModel.plan_id == str(plan_id),
                ScheduledPaymentModel.status != ScheduledPaymentStatus.COMPLETED.value,
            )
            .exists()
        )
        stmt = (
            update(CreditPlanModel)
            .where(
                CreditPlanModel.id == str(plan_id),
                CreditPlanModel.user_id == user_id,
                CreditPlanModel.status == PlanStatus.ACTIVE.value,
                ~outstanding,
            )
            .values(
                status=PlanStatus.COMPLETED.value,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)

        return result.rowcount > 0

    def _to_entity(self, model: CreditPlanModel) -> CreditPlan:
        return CreditPlan(
            id=UUID(model.id),
            user_id=model.user_id,
            name=model.name,
            total_amount_cents=model.total_amount_cents,
            monthly_amount_cents=model.monthly_amount_cents,
            term_months=model.term_months,
            start_date=model.start_date,
            status=PlanStatus(model.status),
            autopay_enabled=model.autopay_enabled,
            scheduled_payments=[
                scheduled_payment_to_entity(payment)
                for payment in model.scheduled_payments
            ],
            created_at=model.created_at,
        )
