class DomainError(Exception):
    """Base exception for analytics failures."""


class ValidationError(DomainError):
    """Raised when request parameters are invalid."""


class RecordSourceError(DomainError):
    """Raised when the attendance store cannot be read (connection or query failure)."""
