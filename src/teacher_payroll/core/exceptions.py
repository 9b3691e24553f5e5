class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidRange(ValidationError):
    """Raised when a date range is unparsable or starts after it ends."""


class AuthorizationError(DomainError):
    """Raised when a principal lacks the capability for an action."""


class UnknownTenant(DomainError):
    """Raised when no school matches the requested tenant scope."""


class UnknownTeacher(DomainError):
    """Raised when the teacher does not exist inside the resolved tenant."""


class ConfigMissing(DomainError):
    """Signals a tenant without deduction config.

    Never fatal: the engine substitutes the documented defaults and logs it.
    """


class PartialDataUnavailable(DomainError):
    """Raised when one collaborator store fails during a calculation."""

    def __init__(self, store: str, message: str = ""):
        self.store = store
        super().__init__(message or f"{store} store unavailable")
