"""PostgreSQL repository implementation for scheduled payments."""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from credit_builder.domain.entities import (
    ScheduledPayment,
    ScheduledPaymentPatch,
    ScheduledPaymentStatus,
)
from credit_builder.domain.interfaces import ScheduledPaymentRepository
from credit_builder.infrastructure.database.models import ScheduledPaymentModel

logger = structlog.get_logger(__name__)


def scheduled_payment_to_entity(model: ScheduledPaymentModel) -> ScheduledPayment:
    return ScheduledPayment(
        id=UUID(model.id),
        plan_id=UUID(model.plan_id),
        user_id=model.user_id,
        installment_number=model.installment_number,
        due_date=model.due_date,
        amount_cents=model.amount_cents,
        status=ScheduledPaymentStatus(model.status),
        paid_at=model.paid_at,
    )


class PostgresScheduledPaymentRepository(ScheduledPaymentRepository):
    """PostgreSQL-backed scheduled payment repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, payment_id: UUID, user_id: str) -> Optional[ScheduledPayment]:
        stmt = (
            select(ScheduledPaymentModel)
            .where(
                ScheduledPaymentModel.id == str(payment_id),
                ScheduledPaymentModel.user_id == user_id,
            )
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return scheduled_payment_to_entity(model)

    async def get_by_user_id(
        self,
        user_id: str,
        plan_id: Optional[UUID] = None,
    ) -> List[ScheduledPayment]:
        stmt = select(ScheduledPaymentModel).where(ScheduledPaymentModel.user_id == user_id)
        if plan_id is not None:
            stmt = stmt.where(ScheduledPaymentModel.plan_id == str(plan_id))
        stmt = stmt.order_by(
            ScheduledPaymentModel.due_date.asc(),
            ScheduledPaymentModel.installment_number.asc(),
        ).execution_options(populate_existing=True)

        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [scheduled_payment_to_entity(model) for model in models]

    async def update_scheduled_payment(
        self,
        payment_id: UUID,
        user_id: str,
        patch: ScheduledPaymentPatch,
    ) -> Optional[ScheduledPayment]:
        if not patch.expected_statuses:
            return None

        values = {
            "status": patch.status.value,
            "updated_at": datetime.now(timezone.utc),
        }
        if patch.paid_at is not None:
            values["paid_at"] = patch.paid_at

        # Compare-and-swap on status: concurrent deliveries for the same row
        # serialize on the row lock and the loser matches zero rows.
        stmt = (
            update(ScheduledPaymentModel)
            .where(
                ScheduledPaymentModel.id == str(payment_id),
                ScheduledPaymentModel.user_id == user_id,
                ScheduledPaymentModel.status.in_(
                    [status.value for status in patch.expected_statuses]
                ),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)

        if result.rowcount == 0:
            logger.debug(
                "scheduled_payment_update_skipped",
                scheduled_payment_id=str(payment_id),
                target_status=patch.status.value,
            )
            return None

        return await self.get_by_id(payment_id, user_id)
