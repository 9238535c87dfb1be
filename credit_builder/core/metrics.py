"""Prometheus metrics for the Credit Builder payments service.

Metrics are organized into two categories:

Business Metrics (for Product/Finance):
- credit_builder_plans_created_total: Plans created
- credit_builder_plan_amount_cents: Plan totals
- credit_builder_transactions_recorded_total: Ledger rows by result
- credit_builder_payment_transitions_total: Scheduled payment transitions

Technical Metrics (for Engineering/SRE):
- credit_builder_webhook_events_total: Processor events by type/outcome
- credit_builder_webhook_signature_failures_total: Rejected deliveries
- credit_builder_intent_creation_latency_seconds: Processor intent latency
- credit_builder_intent_creation_failures_total: Processor intent failures
- credit_builder_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Product/Finance dashboards)
# =============================================================================

plans_created_total = Counter(
    "credit_builder_plans_created_total",
    "Total number of credit-builder plans created",
)

plan_amount_cents = Histogram(
    "credit_builder_plan_amount_cents",
    "Total amount of created plans in cents",
    buckets=[5_000, 10_000, 25_000, 50_000, 100_000, 250_000, 500_000, 1_000_000],
)

transactions_recorded_total = Counter(
    "credit_builder_transactions_recorded_total",
    "Ledger transactions by recording result",
    ["result"],  # created, duplicate
)

payment_transitions_total = Counter(
    "credit_builder_payment_transitions_total",
    "Scheduled payment status transitions",
    ["target", "result"],  # result: applied, noop
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

webhook_events_total = Counter(
    "credit_builder_webhook_events_total",
    "Processor webhook events by type and outcome",
    ["event_type", "outcome"],
)

webhook_signature_failures = Counter(
    "credit_builder_webhook_signature_failures_total",
    "Webhook deliveries rejected by signature or payload verification",
)

intent_creation_latency = Histogram(
    "credit_builder_intent_creation_latency_seconds",
    "Payment intent creation latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

intent_creation_total = Counter(
    "credit_builder_intent_creation_total",
    "Total number of payment intent creation requests",
    ["status"],  # success, failure
)

intent_creation_failures = Counter(
    "credit_builder_intent_creation_failures_total",
    "Total number of payment intent creation failures",
    ["error_type"],  # timeout, error
)

http_requests_total = Counter(
    "credit_builder_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "credit_builder_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_plan_created(total_amount_cents: int) -> None:
    """Record a newly created plan."""
    plans_created_total.inc()
    plan_amount_cents.observe(total_amount_cents)


def record_transaction(created: bool) -> None:
    """Record the result of appending a ledger transaction."""
    transactions_recorded_total.labels(
        result="created" if created else "duplicate"
    ).inc()


def record_payment_transition(target: str, applied: bool) -> None:
    """Record a scheduled payment transition attempt."""
    payment_transitions_total.labels(
        target=target,
        result="applied" if applied else "noop",
    ).inc()


def record_webhook_event(event_type: str, outcome: str) -> None:
    """Record a processed webhook event."""
    webhook_events_total.labels(event_type=event_type, outcome=outcome).inc()


def record_webhook_signature_failure() -> None:
    """Record a webhook delivery that failed verification."""
    webhook_signature_failures.inc()


@contextmanager
def track_intent_creation_latency() -> Generator[None, None, None]:
    """Context manager to track payment intent creation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        intent_creation_latency.observe(duration)


def record_intent_creation_success() -> None:
    """Record a successful payment intent creation."""
    intent_creation_total.labels(status="success").inc()


def record_intent_creation_failure(error_type: str) -> None:
    """Record a payment intent creation failure."""
    intent_creation_total.labels(status="failure").inc()
    intent_creation_failures.labels(error_type=error_type).inc()


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
