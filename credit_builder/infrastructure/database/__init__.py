"""Database infrastructure."""

from .connection import get_db_session, DatabaseSessionManager, db_manager
from .models import (
    Base,
    CreditPlanModel,
    ProcessorEventModel,
    ScheduledPaymentModel,
    TransactionModel,
)

__all__ = [
    "get_db_session",
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "CreditPlanModel",
    "ProcessorEventModel",
    "ScheduledPaymentModel",
    "TransactionModel",
]
