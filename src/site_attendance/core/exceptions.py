class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class OutOfRangeError(ValidationError):
    """Raised when a geographic coordinate is outside its valid bounds."""


class NegativeDurationError(ValidationError):
    """Raised when a duration is built from a negative number of minutes."""


class InvalidInputError(DomainError):
    """Raised when a caller passes inconsistent collections (programmer error)."""


class TransientStorageError(DomainError):
    """Raised by repositories when a write may succeed if retried."""
