"""Stripe implementation of PaymentProcessorClient."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import stripe
import structlog

from credit_builder.core.config import settings
from credit_builder.core.metrics import (
    record_intent_creation_failure,
    record_intent_creation_success,
    track_intent_creation_latency,
)
from credit_builder.domain.entities import PaymentCorrelation, PaymentIntent, ProcessorEvent
from credit_builder.domain.exceptions import (
    PaymentProcessorConfigurationException,
    PaymentProcessorException,
    PaymentProcessorTimeoutException,
    WebhookPayloadException,
    WebhookSignatureException,
)
from credit_builder.domain.interfaces import PaymentProcessorClient

logger = structlog.get_logger(__name__)


class StripePaymentProcessorClient(PaymentProcessorClient):
    """
    Stripe client for payment intents and webhook verification.

    One instance is built at application startup and shared; the
    underlying StripeClient is created on first use so the service can
    boot without processor credentials.
    """

    def __init__(
        self,
        secret_key: str | None = None,
        publishable_key: str | None = None,
        webhook_secret: str | None = None,
        timeout: float | None = None,
        max_network_retries: int | None = None,
        webhook_tolerance: int | None = None,
        currency: str | None = None,
        client: stripe.StripeClient | None = None,
    ):
        self._secret_key = secret_key if secret_key is not None else settings.stripe_secret_key
        self._publishable_key = (
            publishable_key if publishable_key is not None else settings.stripe_publishable_key
        )
        self._webhook_secret = (
            webhook_secret if webhook_secret is not None else settings.stripe_webhook_secret
        )
        self._timeout = timeout or settings.stripe_api_timeout
        self._max_network_retries = (
            max_network_retries
            if max_network_retries is not None
            else settings.stripe_max_network_retries
        )
        self._webhook_tolerance = webhook_tolerance or settings.stripe_webhook_tolerance
        self._currency = currency or settings.payment_currency
        self._client = client

    @property
    def _stripe(self) -> stripe.StripeClient:
        if self._client is None:
            if not self._secret_key:
                raise PaymentProcessorConfigurationException("STRIPE_SECRET_KEY")
            self._client = stripe.StripeClient(
                self._secret_key,
                http_client=stripe.HTTPXClient(timeout=self._timeout),
                max_network_retries=self._max_network_retries,
            )
        return self._client

    def get_publishable_key(self) -> str:
        if not self._publishable_key:
            raise PaymentProcessorConfigurationException("STRIPE_PUBLISHABLE_KEY")
        return self._publishable_key

    def verify_event(self, payload: bytes, signature: Optional[str]) -> ProcessorEvent:
        """
        Verify the Stripe-Signature header against the raw body.

        stripe.Webhook.construct_event checks the header against HMAC-SHA256
        of "<timestamp>.<body>" with the endpoint secret, within the
        configured timestamp tolerance, and parses the body.
        """
        if not self._webhook_secret:
            raise PaymentProcessorConfigurationException("STRIPE_WEBHOOK_SECRET")

        if not signature:
            raise WebhookSignatureException("Missing Stripe-Signature header")

        try:
            body = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise WebhookPayloadException("Webhook payload is not valid UTF-8") from exc

        try:
            data = stripe.Webhook.construct_event(
                body,
                signature,
                self._webhook_secret,
                tolerance=self._webhook_tolerance,
            )
        except stripe.SignatureVerificationError as exc:
            raise WebhookSignatureException(str(exc)) from exc
        except (ValueError, AttributeError, TypeError) as exc:
            # JSON that is not an object fails inside Event.construct_from
            raise WebhookPayloadException("Webhook payload is not valid JSON") from exc

        if not isinstance(data, dict) or not data.get("id") or not data.get("type"):
            raise WebhookPayloadException("Webhook payload is not a processor event")

        return self._parse_event(data)

    async def create_payment_intent(
        self,
        amount_cents: int,
        correlation: PaymentCorrelation,
    ) -> PaymentIntent:
        """
        Create a PaymentIntent carrying the correlation ids as metadata.

        The whole call, retries included, is bounded by the configured
        timeout.
        """
        params = {
            "amount": amount_cents,
            "currency": self._currency,
            "metadata": correlation.to_metadata(),
            "automatic_payment_methods": {"enabled": True},
        }

        try:
            with track_intent_creation_latency():
                intent = await asyncio.wait_for(
                    self._stripe.payment_intents.create_async(params=params),
                    timeout=self._timeout,
                )
        except (asyncio.TimeoutError, stripe.APIConnectionError) as exc:
            record_intent_creation_failure("timeout")
            logger.warning(
                "payment_intent_timeout",
                user_id=correlation.user_id,
                error=str(exc),
            )
            raise PaymentProcessorTimeoutException() from exc
        except stripe.StripeError as exc:
            record_intent_creation_failure("error")
            logger.error(
                "payment_intent_error",
                user_id=correlation.user_id,
                error=str(exc),
                status_code=exc.http_status,
            )
            raise PaymentProcessorException(
                message=f"Payment processor error: {exc.user_message or str(exc)}",
                status_code=exc.http_status,
            ) from exc

        record_intent_creation_success()
        return self._to_intent(intent)

    async def retrieve_payment_intent(self, payment_intent_id: str) -> Optional[PaymentIntent]:
        try:
            intent = await asyncio.wait_for(
                self._stripe.payment_intents.retrieve_async(payment_intent_id),
                timeout=self._timeout,
            )
        except stripe.InvalidRequestError as exc:
            if exc.code == "resource_missing":
                return None
            raise PaymentProcessorException(
                message=f"Payment processor error: {str(exc)}",
                status_code=exc.http_status,
            ) from exc
        except (asyncio.TimeoutError, stripe.APIConnectionError) as exc:
            logger.warning(
                "payment_intent_retrieve_timeout",
                payment_intent_id=payment_intent_id,
                error=str(exc),
            )
            raise PaymentProcessorTimeoutException() from exc
        except stripe.StripeError as exc:
            raise PaymentProcessorException(
                message=f"Payment processor error: {str(exc)}",
                status_code=exc.http_status,
            ) from exc

        return self._to_intent(intent)

    def _parse_event(self, data: Dict[str, Any]) -> ProcessorEvent:
        """Parse a raw event body into a ProcessorEvent."""
        obj = (data.get("data") or {}).get("object") or {}
        metadata = obj.get("metadata") or {}

        amount = obj.get("amount_received") or obj.get("amount") or 0

        created = data.get("created")
        created_at = (
            datetime.fromtimestamp(created, tz=timezone.utc)
            if isinstance(created, (int, float))
            else None
        )

        return ProcessorEvent(
            id=str(data["id"]),
            type=str(data["type"]),
            payment_intent_id=obj.get("id"),
            amount_cents=int(amount),
            metadata={str(key): str(value) for key, value in metadata.items()},
            created_at=created_at,
        )

    def _to_intent(self, intent: Any) -> PaymentIntent:
        metadata = intent.metadata or {}
        return PaymentIntent(
            id=intent.id,
            client_secret=intent.client_secret,
            amount_cents=intent.amount,
            currency=intent.currency,
            status=intent.status,
            metadata={str(key): str(value) for key, value in metadata.items()},
        )
