"""
Domain Interfaces (Ports)
"""

from .repositories import (
    PlanRepository,
    ProcessorEventRepository,
    ScheduledPaymentRepository,
    TransactionRepository,
)
from .clients import PaymentProcessorClient

__all__ = [
    "PlanRepository",
    "ProcessorEventRepository",
    "ScheduledPaymentRepository",
    "TransactionRepository",
    "PaymentProcessorClient",
]
