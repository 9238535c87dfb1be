"""Payment processor webhook endpoint."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, Request

from credit_builder.application.services import WebhookService
from credit_builder.core.dependencies import get_webhook_service
from credit_builder.presentation.schemas import ErrorResponseSchema, WebhookAckSchema

webhook_router = APIRouter(prefix="/webhooks")

# Path registered with the processor by earlier deployments
webhook_alias_router = APIRouter(prefix="/api")

WEBHOOK_RESPONSES = {
    200: {"description": "Event verified and acknowledged"},
    400: {
        "model": ErrorResponseSchema,
        "description": (
            "Authentication failure. WEBHOOK_SIGNATURE_INVALID when the "
            "Stripe-Signature header is missing, stale or does not match the raw "
            "body; WEBHOOK_PAYLOAD_INVALID when a signed body is not an event. "
            "Stripe treats any non-2xx as a failed delivery and retries it."
        ),
    },
}


async def receive_stripe_webhook(
    request: Request,
    webhook_service: Annotated[WebhookService, Depends(get_webhook_service)],
    stripe_signature: Annotated[Optional[str], Header(alias="Stripe-Signature")] = None,
) -> WebhookAckSchema:
    """
    Receive a Stripe event.

    The body is read as raw bytes and verified before anything is parsed.
    Every verified event is acknowledged with 200, including duplicates
    and events that match nothing, so the processor stops retrying.
    """
    payload = await request.body()

    result = await webhook_service.process_webhook(payload, stripe_signature)

    return WebhookAckSchema(
        status="ok",
        event_id=result.event_id,
        outcome=result.outcome.value,
    )


webhook_router.add_api_route(
    "/stripe",
    receive_stripe_webhook,
    methods=["POST"],
    response_model=WebhookAckSchema,
    summary="Stripe Webhook",
    responses=WEBHOOK_RESPONSES,
)

webhook_alias_router.add_api_route(
    "/stripe/webhook",
    receive_stripe_webhook,
    methods=["POST"],
    response_model=WebhookAckSchema,
    summary="Stripe Webhook (legacy path)",
    responses=WEBHOOK_RESPONSES,
    include_in_schema=False,
)
