"""Authentication boundary exceptions."""

from .base import DomainException


class UnauthenticatedException(DomainException):
    """Raised when a user-facing request carries no authenticated user."""

    def __init__(self):
        super().__init__(
            message="Authentication required",
            code="UNAUTHENTICATED",
        )
