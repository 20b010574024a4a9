class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class InvalidLadderError(DomainError):
    """Raised when a wage ladder has no levels or inconsistent levels."""


class OutOfRangeError(ValidationError):
    """Raised when a bucket value falls outside ``[0, magnitude]``."""


class IncompleteDistributionError(DomainError):
    """Raised when committing while minutes are still unassigned."""

    def __init__(self, remaining_minutes: int):
        self.remaining_minutes = int(remaining_minutes)
        super().__init__(f"{self.remaining_minutes} minutes still unassigned")


class SessionCommittedError(DomainError):
    """Raised when a committed distribution session is used again."""


class PersistenceError(DomainError):
    """Raised by repositories when the backing store rejects a write."""
