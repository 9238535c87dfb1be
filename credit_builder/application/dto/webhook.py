"""Data transfer objects for webhook processing."""

from dataclasses import dataclass

from credit_builder.domain.entities import EventOutcome


@dataclass(frozen=True)
class WebhookResult:
    """What processing one verified delivery did."""

    event_id: str
    event_type: str
    outcome: EventOutcome

    @property
    def applied(self) -> bool:
        return self.outcome == EventOutcome.APPLIED
