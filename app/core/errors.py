"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional to keep backward compatibility while encouraging
    consistent shapes across the codebase.
    """

    code: str
    message: str
    hint: str
    field: str
    http_status: int
    retry_after: float
    review_id: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when request input is malformed or incomplete."""


class AuthenticationAppError(AppError):
    """Raised when the caller credential is missing or cannot be verified."""


class AuthorizationAppError(AppError):
    """Raised when a verified caller is not allowed to act on a resource."""


class NotFoundAppError(AppError):
    """Raised when a referenced resource does not exist."""


class ServiceUnavailableAppError(AppError):
    """Raised when a required outbound service is not configured."""


class InternalAppError(AppError):
    """Raised for unexpected failures; message is always generic."""


class UpstreamAppError(AppError):
    """Raised when an external HTTP collaborator fails or misbehaves."""
