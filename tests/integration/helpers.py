"""Helpers to build and sign Stripe webhook deliveries in tests."""

import hashlib
import hmac
import json
import time
import uuid
from typing import Dict, Optional

from httpx import AsyncClient


WEBHOOK_SECRET = "whsec_test_secret"
PUBLISHABLE_KEY = "pk_test_123"


def sign_payload(
    payload: bytes,
    secret: str = WEBHOOK_SECRET,
    timestamp: Optional[int] = None,
) -> str:
    """Build a Stripe-Signature header for a payload."""
    timestamp = timestamp if timestamp is not None else int(time.time())
    signed = f"{timestamp}.{payload.decode('utf-8')}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def build_event(
    event_type: str,
    *,
    user_id: Optional[str] = None,
    plan_id: Optional[str] = None,
    scheduled_payment_id: Optional[str] = None,
    amount_cents: int = 4167,
    event_id: Optional[str] = None,
    payment_intent_id: Optional[str] = None,
    created: Optional[int] = None,
) -> bytes:
    """Serialize a Stripe payment_intent event body."""
    metadata = {}
    if user_id is not None:
        metadata["user_id"] = user_id
    if plan_id is not None:
        metadata["plan_id"] = plan_id
    if scheduled_payment_id is not None:
        metadata["scheduled_payment_id"] = scheduled_payment_id

    succeeded = event_type == "payment_intent.succeeded"
    body = {
        "id": event_id or f"evt_{uuid.uuid4().hex[:24]}",
        "object": "event",
        "type": event_type,
        "created": created if created is not None else int(time.time()),
        "data": {
            "object": {
                "id": payment_intent_id or f"pi_{uuid.uuid4().hex[:24]}",
                "object": "payment_intent",
                "amount": amount_cents,
                "amount_received": amount_cents if succeeded else 0,
                "currency": "usd",
                "status": "succeeded" if succeeded else "requires_payment_method",
                "metadata": metadata,
            }
        },
    }
    return json.dumps(body).encode("utf-8")


async def post_webhook(
    client: AsyncClient,
    payload: bytes,
    signature: Optional[str] = None,
    path: str = "/v1/webhooks/stripe",
):
    """Deliver a payload, signing it unless a signature is given."""
    headers = {
        "Content-Type": "application/json",
        "Stripe-Signature": signature if signature is not None else sign_payload(payload),
    }
    return await client.post(path, content=payload, headers=headers)


def user_headers(user_id: str) -> Dict[str, str]:
    return {"X-User-ID": user_id}
