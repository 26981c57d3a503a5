class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when the requested entity does not exist."""


class InvalidTransitionError(ValidationError):
    """Raised when a leave request cannot move from its current status."""


class ConflictError(DomainError):
    """Raised when a guarded write affected no rows or a unique value is taken."""


class StoreError(DomainError):
    """Raised when the database rejects a statement or cannot be reached."""
