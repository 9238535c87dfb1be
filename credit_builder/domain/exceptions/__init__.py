"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .auth import UnauthenticatedException
from .plan import InvalidPlanRequestException, PlanNotFoundException
from .payment import (
    InvalidPaymentRequestException,
    PaymentIntentNotFoundException,
    ScheduledPaymentNotFoundException,
)
from .processor import (
    PaymentProcessorConfigurationException,
    PaymentProcessorException,
    PaymentProcessorTimeoutException,
)
from .webhook import (
    WebhookAuthenticationException,
    WebhookPayloadException,
    WebhookSignatureException,
)

__all__ = [
    "DomainException",
    "UnauthenticatedException",
    "InvalidPlanRequestException",
    "PlanNotFoundException",
    "InvalidPaymentRequestException",
    "PaymentIntentNotFoundException",
    "ScheduledPaymentNotFoundException",
    "PaymentProcessorConfigurationException",
    "PaymentProcessorException",
    "PaymentProcessorTimeoutException",
    "WebhookAuthenticationException",
    "WebhookPayloadException",
    "WebhookSignatureException",
]
