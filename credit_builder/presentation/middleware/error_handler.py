"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from credit_builder.domain.exceptions import (
    DomainException,
    InvalidPaymentRequestException,
    InvalidPlanRequestException,
    PaymentIntentNotFoundException,
    PaymentProcessorConfigurationException,
    PaymentProcessorException,
    PaymentProcessorTimeoutException,
    PlanNotFoundException,
    ScheduledPaymentNotFoundException,
    UnauthenticatedException,
    WebhookAuthenticationException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": code,
            "message": message,
            "request_id": get_request_id(),
        },
    )


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses.
    """

    @app.exception_handler(UnauthenticatedException)
    async def unauthenticated_handler(
        request: Request,
        exc: UnauthenticatedException,
    ) -> JSONResponse:
        """Handle requests without an authenticated user."""
        return _error_response(401, exc.code, exc.message)

    @app.exception_handler(PlanNotFoundException)
    async def plan_not_found_handler(
        request: Request,
        exc: PlanNotFoundException,
    ) -> JSONResponse:
        """Handle plan not found errors."""
        return _error_response(404, exc.code, exc.message)

    @app.exception_handler(ScheduledPaymentNotFoundException)
    async def scheduled_payment_not_found_handler(
        request: Request,
        exc: ScheduledPaymentNotFoundException,
    ) -> JSONResponse:
        """Handle scheduled payment not found errors."""
        return _error_response(404, exc.code, exc.message)

    @app.exception_handler(PaymentIntentNotFoundException)
    async def payment_intent_not_found_handler(
        request: Request,
        exc: PaymentIntentNotFoundException,
    ) -> JSONResponse:
        """Handle payment intent not found errors."""
        return _error_response(404, exc.code, exc.message)

    @app.exception_handler(InvalidPlanRequestException)
    async def invalid_plan_request_handler(
        request: Request,
        exc: InvalidPlanRequestException,
    ) -> JSONResponse:
        """Handle invalid plan requests."""
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(InvalidPaymentRequestException)
    async def invalid_payment_request_handler(
        request: Request,
        exc: InvalidPaymentRequestException,
    ) -> JSONResponse:
        """Handle invalid payment requests."""
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(WebhookAuthenticationException)
    async def webhook_authentication_handler(
        request: Request,
        exc: WebhookAuthenticationException,
    ) -> JSONResponse:
        """Reject deliveries that fail verification so the processor retries."""
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(PaymentProcessorTimeoutException)
    async def processor_timeout_handler(
        request: Request,
        exc: PaymentProcessorTimeoutException,
    ) -> JSONResponse:
        """Handle payment processor timeout errors."""
        logger.error(
            "payment_processor_timeout",
            request_id=get_request_id(),
        )
        return _error_response(
            503,
            exc.code,
            "Service temporarily unavailable. Please try again.",
        )

    @app.exception_handler(PaymentProcessorException)
    async def processor_error_handler(
        request: Request,
        exc: PaymentProcessorException,
    ) -> JSONResponse:
        """Handle payment processor errors."""
        logger.error(
            "payment_processor_error",
            request_id=get_request_id(),
            message=exc.message,
            status_code=exc.status_code,
        )
        return _error_response(
            503,
            exc.code,
            "Unable to process payment. Please try again later.",
        )

    @app.exception_handler(PaymentProcessorConfigurationException)
    async def processor_configuration_handler(
        request: Request,
        exc: PaymentProcessorConfigurationException,
    ) -> JSONResponse:
        """Handle a processor that has not been configured."""
        logger.error(
            "payment_processor_not_configured",
            request_id=get_request_id(),
            setting=exc.setting,
        )
        return _error_response(
            503,
            exc.code,
            "Payments are not available right now.",
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return _error_response(
            500,
            "INTERNAL_ERROR",
            "An unexpected error occurred.",
        )
