"""Plan-related domain exceptions."""

from .base import DomainException


class PlanNotFoundException(DomainException):
    """Raised when a plan cannot be found for the requesting user."""

    def __init__(self, plan_id: str):
        super().__init__(
            message=f"Plan not found: {plan_id}",
            code="PLAN_NOT_FOUND",
        )
        self.plan_id = plan_id


class InvalidPlanRequestException(DomainException):
    """Raised when plan parameters or a plan update are invalid."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_PLAN_REQUEST",
        )
