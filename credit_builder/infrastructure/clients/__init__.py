"""External API client implementations."""

from .stripe_client import StripePaymentProcessorClient

__all__ = [
    "StripePaymentProcessorClient",
]
