"""Repository implementations."""

from .plan_repository import PostgresPlanRepository
from .scheduled_payment_repository import PostgresScheduledPaymentRepository
from .transaction_repository import PostgresTransactionRepository
from .processor_event_repository import PostgresProcessorEventRepository

__all__ = [
    "PostgresPlanRepository",
    "PostgresScheduledPaymentRepository",
    "PostgresTransactionRepository",
    "PostgresProcessorEventRepository",
]
