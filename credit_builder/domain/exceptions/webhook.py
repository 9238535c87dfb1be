"""Webhook authentication exceptions."""

from .base import DomainException


class WebhookAuthenticationException(DomainException):
    """Raised when an inbound processor delivery cannot be trusted."""

    def __init__(self, message: str, code: str = "WEBHOOK_AUTHENTICATION_FAILED"):
        super().__init__(message=message, code=code)


class WebhookSignatureException(WebhookAuthenticationException):
    """Raised when the signature header is missing or does not match."""

    def __init__(self, message: str = "Webhook signature verification failed"):
        super().__init__(message=message, code="WEBHOOK_SIGNATURE_INVALID")


class WebhookPayloadException(WebhookAuthenticationException):
    """
    Raised when the payload is not the raw body the processor signed.

    A body that was parsed and re-serialized upstream no longer matches
    its signature.
    """

    def __init__(self, message: str = "Webhook payload must be the raw request body"):
        super().__init__(message=message, code="WEBHOOK_PAYLOAD_INVALID")
