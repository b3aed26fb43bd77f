class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class StoreUnavailableError(DomainError):
    """Raised when the record store cannot be reached or queried.

    This is the only failure a salary computation lets through to callers.
    """
