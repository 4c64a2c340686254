class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when a caller identity is required but missing."""


class NotFoundError(DomainError):
    """Raised when a session or person referenced by the caller does not exist."""


class DuplicateAttendanceError(DomainError):
    """Raised when the (session, person) unique key rejects an insert."""


class CheckinDenied(DomainError):
    """Raised by the check-in service when the eligibility engine says no.

    Carries the full result so controllers can surface diagnostics.
    """

    def __init__(self, result):
        super().__init__(result.reason)
        self.result = result


class InfrastructureError(Exception):
    """Base exception for failures that say nothing about eligibility.

    Callers should treat these as retryable (5xx), never as a denial.
    """


class RepositoryError(InfrastructureError):
    """Raised when a repository read or write fails."""


class RepositoryTimeoutError(RepositoryError):
    """Raised when a repository call exceeds its time limit."""


class DuplicateKeyError(RepositoryError):
    """Raised when a unique constraint rejects a write."""
