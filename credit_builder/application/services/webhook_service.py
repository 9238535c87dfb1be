"""Webhook service - applies verified payment processor events to local state."""

import structlog

from credit_builder.core.metrics import (
    record_payment_transition,
    record_transaction,
    record_webhook_event,
    record_webhook_signature_failure,
)
from credit_builder.domain.entities import (
    EventOutcome,
    PaymentCorrelation,
    ProcessorEvent,
    ProcessorEventType,
    ScheduledPaymentPatch,
    ScheduledPaymentStatus,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from credit_builder.domain.exceptions import (
    WebhookAuthenticationException,
    WebhookPayloadException,
)
from credit_builder.domain.interfaces import (
    PaymentProcessorClient,
    PlanRepository,
    ProcessorEventRepository,
    ScheduledPaymentRepository,
    TransactionRepository,
)
from credit_builder.application.dto import WebhookResult

logger = structlog.get_logger(__name__)


class WebhookService:
    """
    Trust boundary between the payment processor and local state.

    Events may arrive out of order or more than once. Every state change is
    a conditional update or a deduplicated insert, so any replay or
    reordering of succeeded/failed events for the same scheduled payment
    converges to the same result. Business "nothing to apply" cases are
    acknowledged, never raised; only authentication failures raise.
    """

    def __init__(
        self,
        processor: PaymentProcessorClient,
        plan_repository: PlanRepository,
        scheduled_payment_repository: ScheduledPaymentRepository,
        transaction_repository: TransactionRepository,
        event_repository: ProcessorEventRepository,
    ):
        self._processor = processor
        self._plan_repo = plan_repository
        self._payment_repo = scheduled_payment_repository
        self._transaction_repo = transaction_repository
        self._event_repo = event_repository

    async def process_webhook(self, payload: bytes, signature: str | None) -> WebhookResult:
        """
        Verify and apply one webhook delivery.

        Args:
            payload: The raw request body, exactly as received
            signature: The processor's signature header value

        Returns:
            WebhookResult describing the outcome

        Raises:
            WebhookSignatureException: If the signature does not verify
            WebhookPayloadException: If the body is not the raw signed bytes
        """
        if not isinstance(payload, (bytes, bytearray)):
            # A dict or str here means something parsed the body upstream
            logger.warning(
                "webhook_payload_not_raw",
                payload_type=type(payload).__name__,
            )
            record_webhook_signature_failure()
            raise WebhookPayloadException(
                "Webhook payload must be the raw request body bytes, "
                f"got {type(payload).__name__}"
            )

        try:
            event = self._processor.verify_event(bytes(payload), signature)
        except WebhookAuthenticationException as exc:
            logger.warning(
                "webhook_signature_invalid",
                code=exc.code,
                reason=exc.message,
            )
            record_webhook_signature_failure()
            raise

        log = logger.bind(
            event_id=event.id,
            event_type=event.type,
            payment_intent_id=event.payment_intent_id,
        )
        log.info("webhook_event_received")

        if await self._event_repo.exists(event.id):
            log.info("webhook_event_duplicate")
            record_webhook_event(event.type, EventOutcome.DUPLICATE.value)
            return WebhookResult(event.id, event.type, EventOutcome.DUPLICATE)

        outcome = await self._apply(event, log)

        if not await self._event_repo.record(event, outcome):
            # Another delivery of this event got past exists() first
            log.info("webhook_event_duplicate", raced=True)
            outcome = EventOutcome.DUPLICATE

        record_webhook_event(event.type, outcome.value)
        log.info("webhook_event_processed", outcome=outcome.value)

        return WebhookResult(event.id, event.type, outcome)

    async def _apply(self, event: ProcessorEvent, log) -> EventOutcome:
        event_type = event.event_type
        if event_type is None:
            log.info("webhook_event_type_ignored")
            return EventOutcome.IGNORED

        correlation = event.correlation
        if correlation is None:
            # Acknowledge anyway so the processor stops retrying
            log.warning("webhook_event_uncorrelated")
            return EventOutcome.IGNORED

        log = log.bind(user_id=correlation.user_id)

        if event_type == ProcessorEventType.PAYMENT_SUCCEEDED:
            return await self._apply_success(event, correlation, log)
        return await self._apply_failure(correlation, log)

    async def _apply_success(
        self,
        event: ProcessorEvent,
        correlation: PaymentCorrelation,
        log,
    ) -> EventOutcome:
        applied = False
        duplicate = False

        if correlation.scheduled_payment_id is not None:
            payment = await self._payment_repo.update_scheduled_payment(
                correlation.scheduled_payment_id,
                correlation.user_id,
                ScheduledPaymentPatch.to_status(
                    ScheduledPaymentStatus.COMPLETED,
                    paid_at=event.effective_at,
                ),
            )
            record_payment_transition(
                ScheduledPaymentStatus.COMPLETED.value, payment is not None
            )

            if payment is not None:
                applied = True
                log.info(
                    "scheduled_payment_transitioned",
                    scheduled_payment_id=str(payment.id),
                    status=payment.status.value,
                )
                if await self._plan_repo.complete_if_settled(payment.plan_id, correlation.user_id):
                    log.info("plan_completed", plan_id=str(payment.plan_id))
            else:
                log.info(
                    "scheduled_payment_unchanged",
                    scheduled_payment_id=str(correlation.scheduled_payment_id),
                )

        if correlation.plan_id is not None:
            created = await self._record_payment(event, correlation, log)
            if created is True:
                applied = True
            elif created is False:
                duplicate = True

        if applied:
            return EventOutcome.APPLIED
        if duplicate:
            return EventOutcome.DUPLICATE
        return EventOutcome.UNMATCHED

    async def _record_payment(
        self,
        event: ProcessorEvent,
        correlation: PaymentCorrelation,
        log,
    ) -> bool | None:
        """
        Append the ledger row for a succeeded payment.

        Returns:
            True if created, False if already recorded, None if the plan
            is not the event user's
        """
        plan = await self._plan_repo.get_by_id(correlation.plan_id, correlation.user_id)
        if plan is None:
            log.warning("webhook_plan_not_found", plan_id=str(correlation.plan_id))
            return None

        external_id = event.payment_intent_id or event.id
        description = (
            f"Payment for scheduled payment {correlation.scheduled_payment_id}"
            if correlation.scheduled_payment_id
            else "Credit plan payment"
        )

        transaction = await self._transaction_repo.create_transaction(
            correlation.user_id,
            Transaction(
                user_id=correlation.user_id,
                plan_id=plan.id,
                type=TransactionType.PAYMENT,
                amount_cents=event.amount_cents,
                external_id=external_id,
                status=TransactionStatus.COMPLETED,
                description=description,
            ),
        )
        record_transaction(transaction is not None)

        if transaction is None:
            return False

        log.info(
            "transaction_recorded",
            transaction_id=str(transaction.id),
            plan_id=str(plan.id),
            amount_cents=transaction.amount_cents,
        )
        return True

    async def _apply_failure(self, correlation: PaymentCorrelation, log) -> EventOutcome:
        if correlation.scheduled_payment_id is None:
            log.info("webhook_failure_without_scheduled_payment")
            return EventOutcome.IGNORED

        payment = await self._payment_repo.update_scheduled_payment(
            correlation.scheduled_payment_id,
            correlation.user_id,
            ScheduledPaymentPatch.to_status(ScheduledPaymentStatus.FAILED),
        )
        record_payment_transition(ScheduledPaymentStatus.FAILED.value, payment is not None)

        if payment is None:
            log.info(
                "scheduled_payment_unchanged",
                scheduled_payment_id=str(correlation.scheduled_payment_id),
            )
            return EventOutcome.UNMATCHED

        log.info(
            "scheduled_payment_transitioned",
            scheduled_payment_id=str(payment.id),
            status=payment.status.value,
        )
        return EventOutcome.APPLIED
