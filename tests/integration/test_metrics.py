"""
Integration tests for metrics tracking.

These tests verify:
1. Metrics endpoint returns valid Prometheus format
2. Business metrics (plans, transactions, transitions) are tracked
3. Technical metrics (webhook outcomes, signature failures) are recorded
"""

from typing import Optional
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from credit_builder import __version__
from credit_builder.core.config import settings
from credit_builder.core.metrics import REGISTRY
from credit_builder.infrastructure.database import db_manager
from .helpers import build_event, post_webhook, sign_payload, user_headers


def _sample(name: str, labels: Optional[dict] = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


# =============================================================================
# Metrics Endpoint Tests
# =============================================================================

class TestMetricsEndpoint:
    """Tests for GET /metrics endpoint."""

    @pytest.mark.asyncio
    async def test_metrics_endpoint_returns_prometheus_format(
        self,
        client: AsyncClient,
    ):
        response = await client.get("/metrics")

        assert response.status_code == 200

        content_type = response.headers.get("content-type", "")
        assert "text/plain" in content_type or "text/openmetrics" in content_type
        assert "credit_builder_webhook_events_total" in response.text

    @pytest.mark.asyncio
    async def test_request_id_header_is_echoed(
        self,
        client: AsyncClient,
    ):
        response = await client.get("/v1/health", headers={"X-Request-ID": "req-123"})

        assert response.status_code == 200
        assert response.headers["X-Request-ID"] == "req-123"

    @pytest.mark.asyncio
    async def test_metrics_endpoint_hidden_when_disabled(
        self,
        client: AsyncClient,
        monkeypatch: pytest.MonkeyPatch,
    ):
        monkeypatch.setattr(settings, "metrics_enabled", False)

        response = await client.get("/metrics")

        assert response.status_code == 404


class TestHealth:
    """GET /v1/health reports dependencies without failing."""

    @pytest.mark.asyncio
    async def test_healthy_when_database_answers(
        self,
        client: AsyncClient,
        monkeypatch: pytest.MonkeyPatch,
    ):
        monkeypatch.setattr(db_manager, "ping", AsyncMock(return_value=True))

        response = await client.get("/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "ok"
        assert body["version"] == __version__

    @pytest.mark.asyncio
    async def test_degraded_when_database_unavailable(
        self,
        client: AsyncClient,
        monkeypatch: pytest.MonkeyPatch,
    ):
        monkeypatch.setattr(db_manager, "ping", AsyncMock(return_value=False))

        response = await client.get("/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["database"] == "unavailable"


# =============================================================================
# Business Metrics Tests
# =============================================================================

class TestBusinessMetrics:
    """Plan and ledger counters."""

    @pytest.mark.asyncio
    async def test_plan_creation_is_counted(
        self,
        client: AsyncClient,
        plan_request: dict,
    ):
        before = _sample("credit_builder_plans_created_total")

        await client.post("/v1/plans", json=plan_request, headers=user_headers("user_a"))

        assert _sample("credit_builder_plans_created_total") == before + 1

    @pytest.mark.asyncio
    async def test_transaction_results_are_counted(
        self,
        client: AsyncClient,
        plan: dict,
    ):
        created = {"result": "created"}
        duplicate = {"result": "duplicate"}
        created_before = _sample("credit_builder_transactions_recorded_total", created)
        duplicate_before = _sample("credit_builder_transactions_recorded_total", duplicate)

        payment = plan["scheduled_payments"][0]
        for event_id in ("evt_m1", "evt_m2"):
            await post_webhook(
                client,
                build_event(
                    "payment_intent.succeeded",
                    user_id="user_a",
                    plan_id=plan["plan_id"],
                    scheduled_payment_id=payment["scheduled_payment_id"],
                    event_id=event_id,
                    payment_intent_id="pi_metrics",
                ),
            )

        assert _sample("credit_builder_transactions_recorded_total", created) == created_before + 1
        assert (
            _sample("credit_builder_transactions_recorded_total", duplicate)
            == duplicate_before + 1
        )


# =============================================================================
# Webhook Metrics Tests
# =============================================================================

class TestWebhookMetrics:
    """Webhook outcome and rejection counters."""

    @pytest.mark.asyncio
    async def test_signature_failures_are_counted(
        self,
        client: AsyncClient,
    ):
        before = _sample("credit_builder_webhook_signature_failures_total")
        payload = build_event("payment_intent.succeeded", user_id="user_a")

        await post_webhook(client, payload, signature=sign_payload(payload, secret="whsec_bad"))

        assert _sample("credit_builder_webhook_signature_failures_total") == before + 1

    @pytest.mark.asyncio
    async def test_outcomes_are_counted_by_type(
        self,
        client: AsyncClient,
    ):
        labels = {"event_type": "charge.refunded", "outcome": "ignored"}
        before = _sample("credit_builder_webhook_events_total", labels)

        await post_webhook(client, build_event("charge.refunded", user_id="user_a"))

        assert _sample("credit_builder_webhook_events_total", labels) == before + 1
