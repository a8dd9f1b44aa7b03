"""Domain-level exception primitives with stable machine-readable codes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(eq=False)
class DomainError(Exception):
    """Store / use-case level error with stable code and HTTP mapping."""

    code: str
    http_status: int
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message


class ValidationError(DomainError):
    """Required field missing or value outside its enumeration."""

    def __init__(self, message: str, *, code: str = "VALIDATION_FAILED", details: dict[str, Any] | None = None):
        super().__init__(code=code, http_status=422, message=message, details=details)


class NotFoundError(DomainError):
    def __init__(self, message: str, *, code: str = "NOT_FOUND", details: dict[str, Any] | None = None):
        super().__init__(code=code, http_status=404, message=message, details=details)


class DuplicateError(DomainError):
    def __init__(self, message: str, *, code: str = "DUPLICATE", details: dict[str, Any] | None = None):
        super().__init__(code=code, http_status=409, message=message, details=details)


class TransitionError(DomainError):
    """Status change rejected by the transition policy."""

    def __init__(self, message: str, *, code: str = "INVALID_STATUS_TRANSITION", details: dict[str, Any] | None = None):
        super().__init__(code=code, http_status=409, message=message, details=details)


class PermissionDeniedError(DomainError):
    def __init__(self, message: str, *, code: str = "PERMISSION_DENIED", details: dict[str, Any] | None = None):
        super().__init__(code=code, http_status=403, message=message, details=details)
