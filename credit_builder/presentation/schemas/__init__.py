"""Pydantic schemas for API request/response validation."""

from .plan import (
    CreatePlanRequestSchema,
    PlanListResponseSchema,
    PlanResponseSchema,
    ScheduledPaymentListResponseSchema,
    ScheduledPaymentSchema,
    UpdatePlanRequestSchema,
)
from .payment import (
    CreatePaymentIntentRequestSchema,
    PaymentConfigResponseSchema,
    PaymentIntentResponseSchema,
    PaymentStatusRequestSchema,
    PaymentStatusResponseSchema,
    TransactionListResponseSchema,
    TransactionSchema,
)
from .webhook import WebhookAckSchema
from .error import ErrorResponseSchema

__all__ = [
    "CreatePlanRequestSchema",
    "PlanListResponseSchema",
    "PlanResponseSchema",
    "ScheduledPaymentListResponseSchema",
    "ScheduledPaymentSchema",
    "UpdatePlanRequestSchema",
    "CreatePaymentIntentRequestSchema",
    "PaymentConfigResponseSchema",
    "PaymentIntentResponseSchema",
    "PaymentStatusRequestSchema",
    "PaymentStatusResponseSchema",
    "TransactionListResponseSchema",
    "TransactionSchema",
    "WebhookAckSchema",
    "ErrorResponseSchema",
]
