"""
Unit tests for WebhookService outcome logic.

Repositories and the processor are mocked; the integration tests cover
the same paths against a real database.
"""

import uuid
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from credit_builder.application.services import WebhookService
from credit_builder.domain.entities import (
    CreditPlan,
    EventOutcome,
    ProcessorEvent,
    ScheduledPayment,
    ScheduledPaymentStatus,
)
from credit_builder.domain.exceptions import (
    WebhookPayloadException,
    WebhookSignatureException,
)


PLAN_ID = uuid.uuid4()
PAYMENT_ID = uuid.uuid4()
CREATED_AT = datetime(2025, 2, 15, 9, 30, tzinfo=timezone.utc)


def _event(event_type: str = "payment_intent.succeeded", **metadata) -> ProcessorEvent:
    metadata.setdefault("user_id", "user_a")
    return ProcessorEvent(
        id="evt_1",
        type=event_type,
        payment_intent_id="pi_1",
        amount_cents=4167,
        metadata={key: str(value) for key, value in metadata.items()},
        created_at=CREATED_AT,
    )


def _payment(status: ScheduledPaymentStatus) -> ScheduledPayment:
    return ScheduledPayment(
        id=PAYMENT_ID,
        plan_id=PLAN_ID,
        user_id="user_a",
        installment_number=1,
        due_date=date(2025, 2, 15),
        amount_cents=4167,
        status=status,
    )


def _plan() -> CreditPlan:
    return CreditPlan(
        id=PLAN_ID,
        user_id="user_a",
        name="Plan",
        total_amount_cents=50000,
        monthly_amount_cents=4167,
        term_months=12,
        start_date=date(2025, 1, 15),
    )


@pytest.fixture
def processor() -> MagicMock:
    return MagicMock()


@pytest.fixture
def repos() -> dict:
    plan_repo = MagicMock()
    plan_repo.get_by_id = AsyncMock(return_value=_plan())
    plan_repo.complete_if_settled = AsyncMock(return_value=False)

    payment_repo = MagicMock()
    payment_repo.update_scheduled_payment = AsyncMock(
        return_value=_payment(ScheduledPaymentStatus.COMPLETED)
    )

    transaction_repo = MagicMock()
    transaction_repo.create_transaction = AsyncMock(
        side_effect=lambda user_id, txn: txn
    )

    event_repo = MagicMock()
    event_repo.exists = AsyncMock(return_value=False)
    event_repo.record = AsyncMock(return_value=True)

    return {
        "plan_repository": plan_repo,
        "scheduled_payment_repository": payment_repo,
        "transaction_repository": transaction_repo,
        "event_repository": event_repo,
    }


@pytest.fixture
def service(processor: MagicMock, repos: dict) -> WebhookService:
    return WebhookService(processor=processor, **repos)


class TestPayloadGuards:
    """Verification happens before anything else."""

    @pytest.mark.asyncio
    async def test_parsed_payload_rejected_before_verification(
        self,
        service: WebhookService,
        processor: MagicMock,
        repos: dict,
    ):
        with pytest.raises(WebhookPayloadException):
            await service.process_webhook({"id": "evt_1"}, "t=1,v1=abc")

        processor.verify_event.assert_not_called()
        repos["event_repository"].exists.assert_not_called()

    @pytest.mark.asyncio
    async def test_string_payload_rejected(self, service: WebhookService):
        with pytest.raises(WebhookPayloadException):
            await service.process_webhook('{"id": "evt_1"}', "t=1,v1=abc")

    @pytest.mark.asyncio
    async def test_signature_failure_propagates_without_writes(
        self,
        service: WebhookService,
        processor: MagicMock,
        repos: dict,
    ):
        processor.verify_event.side_effect = WebhookSignatureException()

        with pytest.raises(WebhookSignatureException):
            await service.process_webhook(b"{}", "t=1,v1=abc")

        repos["event_repository"].record.assert_not_called()
        repos["scheduled_payment_repository"].update_scheduled_payment.assert_not_called()


class TestOutcomes:
    """Outcome selection for verified events."""

    @pytest.mark.asyncio
    async def test_success_completes_payment_with_processor_time(
        self,
        service: WebhookService,
        processor: MagicMock,
        repos: dict,
    ):
        processor.verify_event.return_value = _event(
            plan_id=PLAN_ID, scheduled_payment_id=PAYMENT_ID
        )

        result = await service.process_webhook(b"{}", "sig")

        assert result.outcome == EventOutcome.APPLIED
        assert result.applied
        patch = repos["scheduled_payment_repository"].update_scheduled_payment.call_args.args[2]
        assert patch.status == ScheduledPaymentStatus.COMPLETED
        assert patch.paid_at == CREATED_AT
        repos["plan_repository"].complete_if_settled.assert_awaited_once_with(PLAN_ID, "user_a")

        txn = repos["transaction_repository"].create_transaction.call_args.args[1]
        assert txn.external_id == "pi_1"
        assert txn.amount_cents == 4167
        assert txn.plan_id == PLAN_ID
        repos["event_repository"].record.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_recorded_event_is_duplicate(
        self,
        service: WebhookService,
        processor: MagicMock,
        repos: dict,
    ):
        processor.verify_event.return_value = _event(scheduled_payment_id=PAYMENT_ID)
        repos["event_repository"].exists.return_value = True

        result = await service.process_webhook(b"{}", "sig")

        assert result.outcome == EventOutcome.DUPLICATE
        repos["scheduled_payment_repository"].update_scheduled_payment.assert_not_called()
        repos["event_repository"].record.assert_not_called()

    @pytest.mark.asyncio
    async def test_already_recorded_transaction_is_duplicate(
        self,
        service: WebhookService,
        processor: MagicMock,
        repos: dict,
    ):
        processor.verify_event.return_value = _event(
            plan_id=PLAN_ID, scheduled_payment_id=PAYMENT_ID
        )
        repos["scheduled_payment_repository"].update_scheduled_payment.return_value = None
        repos["transaction_repository"].create_transaction.side_effect = None
        repos["transaction_repository"].create_transaction.return_value = None

        result = await service.process_webhook(b"{}", "sig")

        assert result.outcome == EventOutcome.DUPLICATE
        repos["plan_repository"].complete_if_settled.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_moves_payment_to_failed(
        self,
        service: WebhookService,
        processor: MagicMock,
        repos: dict,
    ):
        processor.verify_event.return_value = _event(
            "payment_intent.payment_failed",
            plan_id=PLAN_ID,
            scheduled_payment_id=PAYMENT_ID,
        )
        repos["scheduled_payment_repository"].update_scheduled_payment.return_value = (
            _payment(ScheduledPaymentStatus.FAILED)
        )

        result = await service.process_webhook(b"{}", "sig")

        assert result.outcome == EventOutcome.APPLIED
        patch = repos["scheduled_payment_repository"].update_scheduled_payment.call_args.args[2]
        assert patch.status == ScheduledPaymentStatus.FAILED
        assert ScheduledPaymentStatus.COMPLETED not in patch.expected_statuses
        repos["transaction_repository"].create_transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_without_scheduled_payment_is_ignored(
        self,
        service: WebhookService,
        processor: MagicMock,
    ):
        processor.verify_event.return_value = _event(
            "payment_intent.payment_failed", plan_id=PLAN_ID
        )

        result = await service.process_webhook(b"{}", "sig")

        assert result.outcome == EventOutcome.IGNORED

    @pytest.mark.asyncio
    async def test_uncorrelated_event_is_ignored_and_recorded(
        self,
        service: WebhookService,
        processor: MagicMock,
        repos: dict,
    ):
        processor.verify_event.return_value = ProcessorEvent(
            id="evt_1", type="payment_intent.succeeded"
        )

        result = await service.process_webhook(b"{}", "sig")

        assert result.outcome == EventOutcome.IGNORED
        repos["event_repository"].record.assert_awaited_once()
        repos["transaction_repository"].create_transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_foreign_plan_records_nothing(
        self,
        service: WebhookService,
        processor: MagicMock,
        repos: dict,
    ):
        processor.verify_event.return_value = _event(user_id="user_b", plan_id=PLAN_ID)
        repos["plan_repository"].get_by_id.return_value = None

        result = await service.process_webhook(b"{}", "sig")

        assert result.outcome == EventOutcome.UNMATCHED
        repos["transaction_repository"].create_transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_event_logged_concurrently_is_duplicate(
        self,
        service: WebhookService,
        processor: MagicMock,
        repos: dict,
    ):
        processor.verify_event.return_value = _event(
            plan_id=PLAN_ID, scheduled_payment_id=PAYMENT_ID
        )
        repos["event_repository"].record.return_value = False

        result = await service.process_webhook(b"{}", "sig")

        assert result.outcome == EventOutcome.DUPLICATE
        repos["event_repository"].record.assert_awaited_once()
