"""Base domain exception."""


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Carries a stable machine-readable `code` alongside the message; the
    presentation layer maps codes to HTTP responses.
    """

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"
