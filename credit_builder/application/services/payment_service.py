"""Payment service - client-facing payment intent flow and ledger reads."""

from typing import List

import structlog

from credit_builder.domain.entities import PaymentCorrelation
from credit_builder.domain.exceptions import (
    InvalidPaymentRequestException,
    PaymentIntentNotFoundException,
    PlanNotFoundException,
    ScheduledPaymentNotFoundException,
)
from credit_builder.domain.interfaces import (
    PaymentProcessorClient,
    PlanRepository,
    ScheduledPaymentRepository,
    TransactionRepository,
)
from credit_builder.application.dto import (
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
    PaymentStatusResponse,
    TransactionDTO,
)

logger = structlog.get_logger(__name__)


class PaymentService:
    """
    Application service for the paying party's side of a payment.

    Nothing here writes plan, scheduled payment or transaction state: a
    payment only becomes durable when the processor's signed event reaches
    the webhook processor.
    """

    def __init__(
        self,
        processor: PaymentProcessorClient,
        plan_repository: PlanRepository,
        scheduled_payment_repository: ScheduledPaymentRepository,
        transaction_repository: TransactionRepository,
    ):
        self._processor = processor
        self._plan_repo = plan_repository
        self._payment_repo = scheduled_payment_repository
        self._transaction_repo = transaction_repository

    def get_publishable_key(self) -> str:
        return self._processor.get_publishable_key()

    async def create_payment_intent(
        self,
        request: CreatePaymentIntentRequest,
    ) -> PaymentIntentResponse:
        """
        Ask the processor for an intent and return its client secret.

        Args:
            request: Amount and optional plan / scheduled payment ids

        Returns:
            PaymentIntentResponse with the opaque client secret

        Raises:
            InvalidPaymentRequestException: If the request is invalid
            PlanNotFoundException: If the plan is not the caller's
            ScheduledPaymentNotFoundException: If the payment is not the caller's
            PaymentProcessorTimeoutException: If the processor times out
            PaymentProcessorException: If the processor fails
        """
        errors = request.validate()
        if errors:
            raise InvalidPaymentRequestException("; ".join(errors))

        log = logger.bind(
            user_id=request.user_id,
            amount_cents=request.amount_cents,
        )

        plan_id = request.plan_id
        if request.scheduled_payment_id is not None:
            payment = await self._payment_repo.get_by_id(
                request.scheduled_payment_id, request.user_id
            )
            if payment is None:
                raise ScheduledPaymentNotFoundException(str(request.scheduled_payment_id))
            if plan_id is not None and plan_id != payment.plan_id:
                raise InvalidPaymentRequestException(
                    "scheduled_payment_id does not belong to plan_id"
                )
            plan_id = payment.plan_id

        if plan_id is not None:
            plan = await self._plan_repo.get_by_id(plan_id, request.user_id)
            if plan is None:
                raise PlanNotFoundException(str(plan_id))

        correlation = PaymentCorrelation(
            user_id=request.user_id,
            plan_id=plan_id,
            scheduled_payment_id=request.scheduled_payment_id,
        )

        intent = await self._processor.create_payment_intent(
            request.amount_cents,
            correlation,
        )

        log.info(
            "payment_intent_created",
            payment_intent_id=intent.id,
            plan_id=str(plan_id) if plan_id else None,
            scheduled_payment_id=(
                str(request.scheduled_payment_id) if request.scheduled_payment_id else None
            ),
        )

        return PaymentIntentResponse.from_entity(intent)

    async def get_payment_status(
        self,
        user_id: str,
        payment_intent_id: str,
    ) -> PaymentStatusResponse:
        """
        Report the processor's view of an intent.

        Advisory only: this never changes local state, even when the
        processor says the intent succeeded.

        Raises:
            PaymentIntentNotFoundException: If unknown or owned by someone else
        """
        intent = await self._processor.retrieve_payment_intent(payment_intent_id)

        correlation = intent.correlation if intent else None
        if correlation is None or correlation.user_id != user_id:
            logger.warning(
                "payment_intent_not_found",
                payment_intent_id=payment_intent_id,
                user_id=user_id,
            )
            raise PaymentIntentNotFoundException(payment_intent_id)

        logger.info(
            "payment_status_checked",
            payment_intent_id=payment_intent_id,
            user_id=user_id,
            status=intent.status,
        )

        return PaymentStatusResponse.from_entity(intent)

    async def get_transactions(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> List[TransactionDTO]:
        """Retrieve the user's ledger, newest first."""
        transactions = await self._transaction_repo.get_by_user_id(
            user_id, limit=limit, offset=offset
        )
        return [TransactionDTO.from_entity(txn) for txn in transactions]
