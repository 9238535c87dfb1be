"""External client interfaces."""

from abc import ABC, abstractmethod
from typing import Optional

from credit_builder.domain.entities import PaymentCorrelation, PaymentIntent, ProcessorEvent


class PaymentProcessorClient(ABC):
    """
    Abstract client for the external payment processor.

    Constructed once per process and injected into the services that
    need it.
    """

    @abstractmethod
    def get_publishable_key(self) -> str:
        """
        Return the key the paying party's client uses to talk to the processor.

        Raises:
            PaymentProcessorConfigurationException: If no key is configured
        """
        ...

    @abstractmethod
    def verify_event(self, payload: bytes, signature: Optional[str]) -> ProcessorEvent:
        """
        Authenticate a webhook delivery and decode it.

        Args:
            payload: The raw, byte-exact request body
            signature: The processor's signature header value

        Returns:
            The verified event

        Raises:
            WebhookSignatureException: If the signature is missing or invalid
            WebhookPayloadException: If the body cannot be decoded
        """
        ...

    @abstractmethod
    async def create_payment_intent(
        self,
        amount_cents: int,
        correlation: PaymentCorrelation,
    ) -> PaymentIntent:
        """
        Create a processor-side payment intent.

        Args:
            amount_cents: Amount to collect in minor units
            correlation: Identifiers stored as intent metadata

        Returns:
            The created intent, including its client secret

        Raises:
            PaymentProcessorTimeoutException: If the call times out
            PaymentProcessorException: If the processor returns an error
        """
        ...

    @abstractmethod
    async def retrieve_payment_intent(self, payment_intent_id: str) -> Optional[PaymentIntent]:
        """
        Fetch a payment intent by id.

        Returns:
            The intent if it exists, None otherwise
        """
        ...
