"""User-facing messages for failures.

Maps known error codes to short, friendly sentences so nothing from storage
or upstream services (status codes, SQL, hostnames) reaches the customer.
"""

from __future__ import annotations

from app.core.errors import AppError

SAFE_MESSAGES: dict[str, str] = {
    "storage_unreachable": "We couldn't reach our servers. Please check your connection and try again.",
    "storage_write_failed": "We couldn't save your review. Please try again in a moment.",
    "storage_invalid_row": "Something went wrong while saving. Please try again.",
    "unauthorized": "Your session has expired. Please sign in again.",
    "forbidden": "You don't have permission to do that.",
    "review_not_found": "We couldn't find that review.",
}


def safe_error_message(exc: BaseException, fallback: str) -> str:
    """Return a friendly message for ``exc``, or ``fallback`` when unknown."""
    if isinstance(exc, AppError):
        return SAFE_MESSAGES.get(exc.code, fallback)
    return fallback
