class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is malformed (bad coordinates, month out of range, ...)."""


class NotFoundError(DomainError):
    """Raised when an employee, shift or salary structure does not exist."""


class ConflictError(DomainError):
    """Raised when a record already exists for the same period."""


class ComputationHazard(DomainError):
    """Raised when a computation would produce a non-finite value (e.g. zero working days)."""
