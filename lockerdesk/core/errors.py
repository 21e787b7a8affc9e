from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    RESOURCE_EXHAUSTED = "RESOURCE_EXHAUSTED"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL_FAULT = "INTERNAL_FAULT"


class DomainError(Exception):
    """
    Base for expected business failures. The subclass decides the kind, the
    presentation layer decides the transport status.
    """

    kind: ErrorKind = ErrorKind.INTERNAL_FAULT

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(DomainError):
    """Raise to map to HTTP 404."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(DomainError):
    """Raise to map to HTTP 409 (precondition violated)."""

    kind = ErrorKind.CONFLICT


class InvalidCredentialError(DomainError):
    kind = ErrorKind.INVALID_CREDENTIAL


class ResourceExhaustedError(DomainError):
    kind = ErrorKind.RESOURCE_EXHAUSTED


class UnauthenticatedError(DomainError):
    kind = ErrorKind.UNAUTHENTICATED


class RateLimitedError(DomainError):
    kind = ErrorKind.RATE_LIMITED
