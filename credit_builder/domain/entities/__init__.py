"""Domain Entities - Core business objects."""

from .plan import (
    CreditPlan,
    PlanPatch,
    PlanStatus,
    ScheduledPayment,
    ScheduledPaymentPatch,
    ScheduledPaymentStatus,
    allowed_sources,
)
from .transaction import Transaction, TransactionStatus, TransactionType
from .webhook import EventOutcome, PaymentCorrelation, ProcessorEvent, ProcessorEventType
from .payment import PaymentIntent

__all__ = [
    "CreditPlan",
    "PlanPatch",
    "PlanStatus",
    "ScheduledPayment",
    "ScheduledPaymentPatch",
    "ScheduledPaymentStatus",
    "allowed_sources",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "EventOutcome",
    "PaymentCorrelation",
    "ProcessorEvent",
    "ProcessorEventType",
    "PaymentIntent",
]
