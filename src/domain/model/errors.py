"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class AuthError(DomainError):
    """Bad credentials, or a missing/unknown session token."""


class PermissionDeniedError(DomainError):
    """Caller lacks permission for the requested action."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class ConflictError(DomainError):
    """Duplicate unique key, or a stale revision on write."""


class StoreError(DomainError):
    """Any other failure reported by the document store."""
