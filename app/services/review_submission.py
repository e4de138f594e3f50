"""Review submission flow used by the storefront.

Order of operations for one submission:
1. Consult the per-user rate limit guard (no server call)
2. Require a signed-in user
3. Validate the review input
4. Store the review with the user's own credentials
5. Ask the server to notify admins, in the background, sending only the id
6. Count the attempt against the user's window

The submission is complete once the review is stored; the notification
outcome is only logged.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from pydantic import ValidationError

from app.adapters.notifications.http_client import AbstractNotificationClient, HttpNotificationClient
from app.adapters.rate_limit.base import AbstractStateStore
from app.adapters.rate_limit.json_file import JsonFileStateStore
from app.adapters.storage.base import AbstractReviewRepository
from app.adapters.storage.factory import create_review_repository
from app.core.config import PROJECT_ROOT, settings
from app.core.errors import AppError
from app.core.logging import hash_for_log
from app.core.safe_messages import safe_error_message
from app.schemas.review import ReviewSubmission
from app.services.rate_limit_guard import RateLimitConfig, RateLimitGuard, review_identity_key

logger = logging.getLogger(__name__)

# First failing field decides the message shown to the customer
_FIELD_MESSAGES = {
    "rating": "Rating must be between 1 and 5",
    "review_text": "Review must be between 10 and 500 characters",
    "order_id": "Invalid order ID",
    "customer_name": "Customer name must be between 1 and 100 characters",
}


class SubmissionStatus(str, Enum):
    SUBMITTED = "submitted"
    LIMITED = "limited"
    INVALID = "invalid"
    UNAUTHENTICATED = "unauthenticated"
    FAILED = "failed"


@dataclass(frozen=True)
class SubmissionResult:
    status: SubmissionStatus
    message: str
    review_id: str | None = None
    remaining_seconds: int = 0


@dataclass(frozen=True)
class UserSession:
    """Signed-in customer: auth user id plus the session's access token."""

    user_id: str
    access_token: str


def _first_validation_message(exc: ValidationError) -> str:
    for error in exc.errors():
        loc = error.get("loc") or ()
        if loc and loc[0] in _FIELD_MESSAGES:
            return _FIELD_MESSAGES[loc[0]]
    return "Please check your review and try again"


class ReviewSubmissionService:
    """Runs the gated review submission pipeline."""

    def __init__(
        self,
        *,
        reviews: AbstractReviewRepository,
        notifier: AbstractNotificationClient,
        state_store: AbstractStateStore,
        max_attempts: int = 3,
        window_duration_ms: int = 60 * 60 * 1000,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._reviews = reviews
        self._notifier = notifier
        self._state_store = state_store
        self._max_attempts = max_attempts
        self._window_duration_ms = window_duration_ms
        self._clock = clock
        self._pending: set[asyncio.Task[None]] = set()

    def guard_for(self, user_id: str | None) -> RateLimitGuard:
        """Rate limit guard for a user (anonymous visitors share one slot).

        Also used by the UI to poll the countdown while a user is limited.
        """
        config = RateLimitConfig(
            max_attempts=self._max_attempts,
            window_duration_ms=self._window_duration_ms,
            identity_key=review_identity_key(user_id),
        )
        if self._clock is None:
            return RateLimitGuard(config, self._state_store)
        return RateLimitGuard(config, self._state_store, clock=self._clock)

    @property
    def state_store(self) -> AbstractStateStore:
        return self._state_store

    @property
    def pending_notifications(self) -> int:
        return len(self._pending)

    async def submit(
        self,
        session: UserSession | None,
        *,
        order_id: str,
        customer_name: str | None,
        rating: int,
        review_text: str,
    ) -> SubmissionResult:
        guard = self.guard_for(session.user_id if session else None)

        if guard.check_limit():
            return SubmissionResult(
                status=SubmissionStatus.LIMITED,
                message=f"Please wait {guard.remaining_seconds} seconds before submitting another review.",
                remaining_seconds=guard.remaining_seconds,
            )

        if session is None:
            return SubmissionResult(
                status=SubmissionStatus.UNAUTHENTICATED,
                message="You must be logged in to submit a review.",
            )

        try:
            submission = ReviewSubmission(
                rating=rating,
                review_text=review_text,
                order_id=order_id,
                customer_name=customer_name,
            )
        except ValidationError as exc:
            return SubmissionResult(
                status=SubmissionStatus.INVALID,
                message=_first_validation_message(exc),
            )

        try:
            stored = await self._reviews.insert_review(
                submission,
                user_id=session.user_id,
                access_token=session.access_token,
            )
        except AppError as exc:
            logger.error(
                "submission.store_failed",
                extra={"error_code": exc.code, "user_id_hash": hash_for_log(session.user_id)},
            )
            return SubmissionResult(
                status=SubmissionStatus.FAILED,
                message=safe_error_message(exc, "Failed to submit review"),
            )

        self._notify_in_background(stored.id, session.access_token)
        guard.record_attempt()

        logger.info(
            "submission.stored",
            extra={"review_id_hash": hash_for_log(stored.id), "rating": stored.rating},
        )
        return SubmissionResult(
            status=SubmissionStatus.SUBMITTED,
            message="Thank you! Your review will appear after approval.",
            review_id=stored.id,
        )

    def _notify_in_background(self, review_id: str, access_token: str) -> None:
        task = asyncio.create_task(self._notify(review_id, access_token))
        # Held until done; the loop keeps only weak references
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _notify(self, review_id: str, access_token: str) -> None:
        try:
            result: dict[str, Any] = await self._notifier.notify_review(
                review_id, access_token=access_token
            )
            logger.info(
                "submission.notification_sent",
                extra={
                    "review_id_hash": hash_for_log(review_id),
                    "success_count": result.get("successCount"),
                    "fail_count": result.get("failCount"),
                },
            )
        except Exception as exc:
            logger.error(
                "submission.notification_failed",
                extra={
                    "review_id_hash": hash_for_log(review_id),
                    "error_type": type(exc).__name__,
                    "error_code": getattr(exc, "code", None),
                },
            )

    async def drain(self) -> None:
        """Wait for background notifications (shutdown and tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


def create_review_submission_service() -> ReviewSubmissionService:
    """Build the submission service from settings.

    A relative state file is resolved against the project root, like the
    .env files.
    """
    cfg = settings.review
    state_file = Path(cfg.rate_limit_state_file)
    if not state_file.is_absolute():
        state_file = PROJECT_ROOT / state_file
    return ReviewSubmissionService(
        reviews=create_review_repository(),
        notifier=HttpNotificationClient(cfg.functions_url, anon_key=settings.supabase.anon_key),
        state_store=JsonFileStateStore(state_file),
        max_attempts=cfg.rate_limit_max_attempts,
        window_duration_ms=cfg.rate_limit_window_ms,
    )
