# core/exceptions.py

class DomainError(Exception):
    """Base class for project-plan errors surfaced to the caller."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when input is invalid (self-dependency, missing task, bad dates...)."""


class NotFoundError(DomainError):
    """Raised when a task, dependency or project does not exist in scope."""


class BusinessRuleError(DomainError):
    """Raised when a scheduling rule is violated (e.g. a dependency cycle)."""


class ConcurrencyError(DomainError):
    """Raised when optimistic locking detects a stale task write."""
