"""Payment processor-related domain exceptions."""

from .base import DomainException


class PaymentProcessorException(DomainException):
    """Raised when the payment processor returns an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            code="PAYMENT_PROCESSOR_ERROR",
        )
        self.status_code = status_code


class PaymentProcessorTimeoutException(PaymentProcessorException):
    """Raised when the payment processor times out or is unreachable."""

    def __init__(self):
        super().__init__(
            message="Payment processor request timed out",
            status_code=None,
        )
        self.code = "PAYMENT_PROCESSOR_TIMEOUT"


class PaymentProcessorConfigurationException(DomainException):
    """Raised when a required processor credential is not configured."""

    def __init__(self, setting: str):
        super().__init__(
            message=f"Payment processor is not configured: missing {setting}",
            code="PAYMENT_PROCESSOR_NOT_CONFIGURED",
        )
        self.setting = setting
