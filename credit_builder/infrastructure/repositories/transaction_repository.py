"""PostgreSQL implementation of TransactionRepository."""

from typing import List, Optional
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from credit_builder.domain.entities import (
    Transaction,
    TransactionStatus,
    TransactionType,
)
from credit_builder.domain.interfaces import TransactionRepository
from credit_builder.infrastructure.database.models import TransactionModel

logger = structlog.get_logger(__name__)


class PostgresTransactionRepository(TransactionRepository):
    """
    PostgreSQL implementation of the transaction ledger.

    Duplicates are detected by looking up the external id before insert.
    When two deliveries race past the lookup, the unique constraint on
    `external_id` rejects the second insert inside a savepoint and it is
    reported as a duplicate.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create_transaction(
        self,
        user_id: str,
        transaction: Transaction,
    ) -> Optional[Transaction]:
        """Append a ledger row unless the external id is already recorded."""
        existing = await self.get_by_external_id(transaction.external_id)
        if existing is not None:
            logger.info(
                "transaction_duplicate_skipped",
                external_id=transaction.external_id,
                existing_transaction_id=str(existing.id),
            )
            return None

        model = TransactionModel(
            id=str(transaction.id),
            user_id=user_id,
            plan_id=str(transaction.plan_id) if transaction.plan_id else None,
            type=transaction.type.value,
            amount_cents=transaction.amount_cents,
            external_id=transaction.external_id,
            status=transaction.status.value,
            description=transaction.description,
            created_at=transaction.created_at,
        )

        try:
            async with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError:
            logger.info(
                "transaction_duplicate_rejected",
                external_id=transaction.external_id,
            )
            return None

        return self._to_entity(model)

    async def get_by_external_id(self, external_id: str) -> Optional[Transaction]:
        """Retrieve a transaction by processor reference."""
        stmt = select(TransactionModel).where(TransactionModel.external_id == external_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def get_by_user_id(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Transaction]:
        """Retrieve transactions for a user, ordered by created_at descending."""
        stmt = (
            select(TransactionModel)
            .where(TransactionModel.user_id == user_id)
            .order_by(TransactionModel.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [self._to_entity(model) for model in models]

    def _to_entity(self, model: TransactionModel) -> Transaction:
        """Convert database model to domain entity."""
        return Transaction(
            id=UUID(model.id),
            user_id=model.user_id,
            plan_id=UUID(model.plan_id) if model.plan_id else None,
            type=TransactionType(model.type),
            amount_cents=model.amount_cents,
            external_id=model.external_id,
            status=TransactionStatus(model.status),
            description=model.description,
            created_at=model.created_at,
        )
