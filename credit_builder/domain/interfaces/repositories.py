"""Repository interfaces for data persistence.

Every read and write is scoped by the owning user id: a record that
exists but belongs to someone else is reported exactly like a missing one.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from credit_builder.domain.entities import (
    CreditPlan,
    EventOutcome,
    PlanPatch,
    ProcessorEvent,
    ScheduledPayment,
    ScheduledPaymentPatch,
    Transaction,
)


class PlanRepository(ABC):
    """
    Abstract repository for CreditPlan persistence.

    Implementations may use PostgreSQL, in-memory storage, etc.
    """

    @abstractmethod
    async def create_plan_with_schedule(self, plan: CreditPlan) -> CreditPlan:
        """
        Persist a plan together with all of its scheduled payments.

        Either the plan and every scheduled payment persist, or none do.

        Args:
            plan: The plan to save, with `scheduled_payments` populated

        Returns:
            The saved plan
        """
        ...

    @abstractmethod
    async def get_by_id(self, plan_id: UUID, user_id: str) -> Optional[CreditPlan]:
        """
        Retrieve a plan owned by `user_id`.

        Returns:
            The plan with its scheduled payments if found, None otherwise
        """
        ...

    @abstractmethod
    async def get_by_user_id(self, user_id: str) -> List[CreditPlan]:
        """
        Retrieve all plans for a user.

        Returns:
            List of plans, newest first
        """
        ...

    @abstractmethod
    async def update_plan(
        self,
        plan_id: UUID,
        user_id: str,
        patch: PlanPatch,
    ) -> Optional[CreditPlan]:
        """
        Apply user-editable changes to a plan.

        Returns:
            The updated plan, or None if not found for this user
        """
        ...

    @abstractmethod
    async def complete_if_settled(self, plan_id: UUID, user_id: str) -> bool:
        """
        Mark an active plan completed once every scheduled payment is completed.

        Returns:
            True if the plan moved to completed by this call
        """
        ...


class ScheduledPaymentRepository(ABC):
    """
    Abstract repository for ScheduledPayment persistence.

    Scheduled payments are created with their plan; afterwards only their
    status and paid-at timestamp change.
    """

    @abstractmethod
    async def get_by_id(self, payment_id: UUID, user_id: str) -> Optional[ScheduledPayment]:
        """
        Retrieve a scheduled payment owned by `user_id`.

        Returns:
            The scheduled payment if found, None otherwise
        """
        ...

    @abstractmethod
    async def get_by_user_id(
        self,
        user_id: str,
        plan_id: Optional[UUID] = None,
    ) -> List[ScheduledPayment]:
        """
        Retrieve scheduled payments for a user, optionally for one plan.

        Returns:
            List of scheduled payments ordered by due date
        """
        ...

    @abstractmethod
    async def update_scheduled_payment(
        self,
        payment_id: UUID,
        user_id: str,
        patch: ScheduledPaymentPatch,
    ) -> Optional[ScheduledPayment]:
        """
        Conditionally transition a scheduled payment.

        The update is a single compare-and-swap: it only takes effect while
        the row belongs to `user_id` and its status is one of
        `patch.expected_statuses`. Concurrent callers racing on the same row
        therefore cannot both apply.

        Returns:
            The updated payment, or None when nothing was changed
        """
        ...


class TransactionRepository(ABC):
    """
    Abstract repository for the append-only transaction ledger.

    Transactions are never updated once created.
    """

    @abstractmethod
    async def create_transaction(
        self,
        user_id: str,
        transaction: Transaction,
    ) -> Optional[Transaction]:
        """
        Append a ledger row unless one with the same external id exists.

        Returns:
            The created transaction, or None if it was a duplicate
        """
        ...

    @abstractmethod
    async def get_by_external_id(self, external_id: str) -> Optional[Transaction]:
        """
        Retrieve a transaction by processor reference.

        Returns:
            The transaction if found, None otherwise
        """
        ...

    @abstractmethod
    async def get_by_user_id(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Transaction]:
        """
        Retrieve transactions for a user.

        Returns:
            List of transactions, newest first
        """
        ...


class ProcessorEventRepository(ABC):
    """
    Abstract repository for received processor events.

    Events are persisted to enable:
    - Detection of duplicate deliveries
    - Auditing of what each delivery did
    """

    @abstractmethod
    async def exists(self, event_id: str) -> bool:
        """Return True if the event has already been processed."""
        ...

    @abstractmethod
    async def record(self, event: ProcessorEvent, outcome: EventOutcome) -> bool:
        """
        Persist a processed event and its outcome.

        Args:
            event: The verified event
            outcome: What processing did to local state

        Returns:
            False if a concurrent delivery already logged the event id
        """
        ...
