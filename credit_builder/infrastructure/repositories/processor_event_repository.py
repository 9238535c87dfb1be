"""PostgreSQL implementation of ProcessorEventRepository."""

import structlog
from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from credit_builder.domain.entities import EventOutcome, ProcessorEvent
from credit_builder.domain.interfaces import ProcessorEventRepository
from credit_builder.infrastructure.database.models import ProcessorEventModel

logger = structlog.get_logger(__name__)


class PostgresProcessorEventRepository(ProcessorEventRepository):
    """
    PostgreSQL implementation of the inbound event log.

    The unique event_id is the final word on duplicates: an insert that
    loses a race with a concurrent delivery reports False instead of
    failing the request.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def exists(self, event_id: str) -> bool:
        """Check whether an event id has already been recorded."""
        stmt = select(ProcessorEventModel.event_id).where(
            ProcessorEventModel.event_id == event_id
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def record(self, event: ProcessorEvent, outcome: EventOutcome) -> bool:
        """Persist a processed event; False if the event id is already logged."""
        correlation = event.correlation

        stmt = insert(ProcessorEventModel).values(
            event_id=event.id,
            event_type=event.type,
            payment_intent_id=event.payment_intent_id,
            user_id=correlation.user_id if correlation else None,
            outcome=outcome.value,
            processor_created_at=event.created_at,
            received_at=event.received_at,
        )

        try:
            async with self._session.begin_nested():
                await self._session.execute(stmt)
        except IntegrityError:
            logger.info("processor_event_already_recorded", event_id=event.id)
            return False

        return True
