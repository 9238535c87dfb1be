"""Inbound payment processor event entities."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Mapping, Optional
from uuid import UUID


class ProcessorEventType(str, Enum):
    """Processor event types that change local state."""

    PAYMENT_SUCCEEDED = "payment_intent.succeeded"
    PAYMENT_FAILED = "payment_intent.payment_failed"

    @classmethod
    def parse(cls, value: str) -> Optional["ProcessorEventType"]:
        try:
            return cls(value)
        except ValueError:
            return None


class EventOutcome(str, Enum):
    """What processing a verified event did to local state."""

    APPLIED = "applied"
    DUPLICATE = "duplicate"
    IGNORED = "ignored"
    UNMATCHED = "unmatched"


def _parse_uuid(value: object) -> Optional[UUID]:
    if value is None or value == "":
        return None
    try:
        return UUID(str(value))
    except ValueError:
        return None


@dataclass(frozen=True)
class PaymentCorrelation:
    """
    Identifiers carried in payment intent metadata that locate local rows.

    The user id is mandatory; plan and scheduled payment ids are optional.
    """

    USER_KEY = "user_id"
    PLAN_KEY = "plan_id"
    SCHEDULED_PAYMENT_KEY = "scheduled_payment_id"

    user_id: str
    plan_id: Optional[UUID] = None
    scheduled_payment_id: Optional[UUID] = None

    @classmethod
    def from_metadata(cls, metadata: Mapping[str, object] | None) -> Optional["PaymentCorrelation"]:
        """
        Build a correlation from processor metadata.

        Returns None when no usable user id is present. Malformed plan or
        scheduled payment ids are dropped.
        """
        if not metadata:
            return None

        user_id = str(metadata.get(cls.USER_KEY) or "").strip()
        if not user_id:
            return None

        return cls(
            user_id=user_id,
            plan_id=_parse_uuid(metadata.get(cls.PLAN_KEY)),
            scheduled_payment_id=_parse_uuid(metadata.get(cls.SCHEDULED_PAYMENT_KEY)),
        )

    def to_metadata(self) -> dict[str, str]:
        metadata = {self.USER_KEY: self.user_id}
        if self.plan_id is not None:
            metadata[self.PLAN_KEY] = str(self.plan_id)
        if self.scheduled_payment_id is not None:
            metadata[self.SCHEDULED_PAYMENT_KEY] = str(self.scheduled_payment_id)
        return metadata


@dataclass(frozen=True)
class ProcessorEvent:
    """
    A verified event delivered by the payment processor.

    Only built after the delivery signature has been checked.
    """

    id: str
    type: str
    payment_intent_id: Optional[str] = None
    amount_cents: int = 0
    metadata: Mapping[str, str] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def event_type(self) -> Optional[ProcessorEventType]:
        return ProcessorEventType.parse(self.type)

    @property
    def correlation(self) -> Optional[PaymentCorrelation]:
        return PaymentCorrelation.from_metadata(self.metadata)

    @property
    def effective_at(self) -> datetime:
        """When the outcome happened according to the processor."""
        return self.created_at or self.received_at
