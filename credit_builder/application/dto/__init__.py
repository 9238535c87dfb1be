"""Data Transfer Objects for application layer."""

from .plan import (
    CreatePlanRequest,
    PlanResponse,
    ScheduledPaymentDTO,
    UpdatePlanRequest,
)
from .payment import (
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
    PaymentStatusResponse,
    TransactionDTO,
)
from .webhook import WebhookResult

__all__ = [
    "CreatePlanRequest",
    "PlanResponse",
    "ScheduledPaymentDTO",
    "UpdatePlanRequest",
    "CreatePaymentIntentRequest",
    "PaymentIntentResponse",
    "PaymentStatusResponse",
    "TransactionDTO",
    "WebhookResult",
]
