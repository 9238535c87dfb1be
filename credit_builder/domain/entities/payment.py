"""Payment intent entity returned by the payment processor."""

from dataclasses import dataclass, field
from typing import Mapping, Optional

from .webhook import PaymentCorrelation


@dataclass(frozen=True)
class PaymentIntent:
    """
    Processor-side intent to collect a payment.

    The client secret is handed to the paying party; it never implies
    that money has moved.
    """

    id: str
    client_secret: Optional[str]
    amount_cents: int
    currency: str
    status: str
    metadata: Mapping[str, str] = field(default_factory=dict)

    @property
    def correlation(self) -> Optional[PaymentCorrelation]:
        return PaymentCorrelation.from_metadata(self.metadata)

    @property
    def is_succeeded(self) -> bool:
        return self.status == "succeeded"
