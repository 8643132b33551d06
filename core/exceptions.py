# core/exceptions.py

class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class InputError(DomainError):
    """Raised for malformed input or unknown ids. Never retried automatically."""


class ValidationError(InputError):
    """Raised when data is invalid or violates constraints."""


class NotFoundError(InputError):
    """Raised when an entity is not found."""


class BusinessRuleError(DomainError):
    """Raised when business rules are violated (e.g., promoting a scenario twice)."""


class ConcurrencyError(DomainError):
    """Raised when optimistic locking detects a stale update."""


class ConflictError(DomainError):
    """Raised when promoting a scenario would over-allocate resources.

    ``conflicts`` holds every offending resource, not just the first one.
    """
    def __init__(self, message: str, conflicts: list | None = None, *, code: str | None = None):
        super().__init__(message, code=code or "SCENARIO_CONFLICTS")
        self.conflicts = list(conflicts or [])


class StorageError(DomainError):
    """Raised when the persistence layer fails; any open batch has been rolled back."""
