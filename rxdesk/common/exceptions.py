"""Exception hierarchy for rxdesk workflows.

Every error here is locally recoverable: callers surface it inline and keep
the enclosing form alive.
"""

from __future__ import annotations


class WorkflowError(Exception):
    """Base error for acquisition workflows."""

    pass


class ValidationError(WorkflowError):
    """Required field missing or malformed."""

    def __init__(self, message: str, field_errors: dict[str, str] | None = None):
        self.field_errors = dict(field_errors or {})
        super().__init__(message)


class NetworkError(WorkflowError):
    """Search, entity creation or submission request failed."""

    def __init__(self, message: str, operation: str | None = None, status_code: int | None = None):
        self.operation = operation
        self.status_code = status_code
        super().__init__(message)


class ConflictError(WorkflowError):
    """Commit would introduce identities already present in the collection."""

    def __init__(self, message: str, identities: list[str] | None = None):
        self.identities = list(identities or [])
        super().__init__(message)
