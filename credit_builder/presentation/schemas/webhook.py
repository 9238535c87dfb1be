"""Webhook acknowledgement schema."""

from pydantic import BaseModel, Field


class WebhookAckSchema(BaseModel):
    """Acknowledgement returned for every verified delivery."""

    status: str = Field("ok", examples=["ok"])
    event_id: str
    outcome: str = Field(
        ...,
        description="applied, duplicate, ignored or unmatched",
        examples=["applied"],
    )
