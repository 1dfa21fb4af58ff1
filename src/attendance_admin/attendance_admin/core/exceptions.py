class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced employee or event does not exist."""


class StoreError(DomainError):
    """Raised when the underlying store fails a read or write."""
