"""Payment-related domain exceptions."""

from .base import DomainException


class ScheduledPaymentNotFoundException(DomainException):
    """Raised when a scheduled payment cannot be found for the requesting user."""

    def __init__(self, scheduled_payment_id: str):
        super().__init__(
            message=f"Scheduled payment not found: {scheduled_payment_id}",
            code="SCHEDULED_PAYMENT_NOT_FOUND",
        )
        self.scheduled_payment_id = scheduled_payment_id


class PaymentIntentNotFoundException(DomainException):
    """Raised when a payment intent is unknown or belongs to another user."""

    def __init__(self, payment_intent_id: str):
        super().__init__(
            message=f"Payment intent not found: {payment_intent_id}",
            code="PAYMENT_INTENT_NOT_FOUND",
        )
        self.payment_intent_id = payment_intent_id


class InvalidPaymentRequestException(DomainException):
    """Raised when a payment request is invalid."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_PAYMENT_REQUEST",
        )
