# core/exceptions.py

class DomainError(Exception):
    """Base class for job-costing errors. ``code`` is stable and machine-readable."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when input is invalid; always raised before anything is written."""


class NotFoundError(DomainError):
    """Raised when a cost code, budget, subcontract, certificate or expense is missing."""


class BusinessRuleError(DomainError):
    """Raised on illegal status transitions and financial invariant violations."""
