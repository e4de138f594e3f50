"""Review notification dispatcher.

Given nothing but a review id from the caller, this service:
- Verifies the caller's credential with the identity provider
- Refuses to run when the mail transport is not configured
- Validates that the body carries exactly a ``reviewId``
- Re-reads the review through its own trusted storage path
- Checks that the verified caller owns the review
- Renders the admin email from the stored (escaped) fields
- Delivers it to every admin concurrently, waiting for all attempts to settle

Per-recipient failures are logged and counted; they never fail the request.
Authorization always completes before the first delivery starts.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

from pydantic import ValidationError

from app.adapters.identity.base import AbstractIdentityVerifier, VerifiedUser
from app.adapters.mail.base import AbstractMailTransport, EmailMessage, MailDeliveryError
from app.adapters.storage.base import AbstractReviewRepository
from app.core.errors import (
    AuthenticationAppError,
    AuthorizationAppError,
    InternalAppError,
    NotFoundAppError,
    ServiceUnavailableAppError,
    ValidationAppError,
)
from app.core.logging import hash_for_log
from app.schemas.review import NotificationRequest, ReviewRecord
from app.services.review_notification import build_review_email, build_subject

logger = logging.getLogger(__name__)

# Errors that describe the request itself and are reported as-is
_CLIENT_FACING_ERRORS = (
    AuthenticationAppError,
    AuthorizationAppError,
    ValidationAppError,
    NotFoundAppError,
    ServiceUnavailableAppError,
)


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of one recipient's delivery attempt."""

    recipient: str
    delivered: bool
    reason: str | None = None


@dataclass(frozen=True)
class DispatchSummary:
    success_count: int
    fail_count: int

    @property
    def message(self) -> str:
        return f"Notifications sent to {self.success_count} admin(s)"

    @classmethod
    def from_outcomes(cls, outcomes: Sequence[DispatchOutcome]) -> "DispatchSummary":
        delivered = sum(1 for outcome in outcomes if outcome.delivered)
        return cls(success_count=delivered, fail_count=len(outcomes) - delivered)


class NotificationDispatcher:
    """Authorizes and fans out "new review" notifications to admins."""

    def __init__(
        self,
        *,
        identity: AbstractIdentityVerifier,
        reviews: AbstractReviewRepository,
        transport: AbstractMailTransport | None,
        recipients: Sequence[str],
        from_address: str,
        admin_panel_url: str,
        delivery_timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            identity: Verifies caller credentials.
            reviews: Trusted read path for review records.
            transport: Mail transport, or None when not configured.
            recipients: Fixed admin addresses notified for every review.
            from_address: Sender of the notification.
            admin_panel_url: Link embedded in the email.
            delivery_timeout_seconds: Upper bound for each recipient's delivery.
        """
        if delivery_timeout_seconds <= 0:
            raise ValueError("delivery_timeout_seconds must be > 0")

        self._identity = identity
        self._reviews = reviews
        self._transport = transport
        self._recipients = tuple(recipients)
        self._from_address = from_address
        self._admin_panel_url = admin_panel_url
        self._delivery_timeout = delivery_timeout_seconds

    async def handle(self, authorization: str | None, body: bytes) -> DispatchSummary:
        """Run the full notification flow for one request.

        Args:
            authorization: Raw ``Authorization`` header value, if any.
            body: Raw request body.

        Returns:
            DispatchSummary with delivered/failed counts.

        Raises:
            AuthenticationAppError: Credential missing or not verifiable.
            ServiceUnavailableAppError: Mail transport not configured.
            ValidationAppError: Body is not ``{"reviewId": "..."}``.
            NotFoundAppError: Review does not exist.
            AuthorizationAppError: Caller does not own the review.
            InternalAppError: Anything unexpected (details only in logs).
        """
        try:
            return await self._handle(authorization, body)
        except _CLIENT_FACING_ERRORS:
            raise
        except Exception as exc:
            logger.error(
                "dispatch.unexpected_error",
                extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
            )
            raise InternalAppError(
                code="internal_server_error",
                message="Internal server error",
            ) from exc

    async def _handle(self, authorization: str | None, body: bytes) -> DispatchSummary:
        user = await self._authenticate(authorization)
        transport = self._require_transport()
        request = self._parse_request(body)
        review = await self._fetch_owned_review(request.review_id, user)

        html_body = build_review_email(review, admin_panel_url=self._admin_panel_url)
        subject = build_subject(review)
        messages = [
            EmailMessage(to=recipient, subject=subject, html=html_body, from_address=self._from_address)
            for recipient in self._recipients
        ]

        outcomes = await self._fan_out(transport, messages)
        summary = DispatchSummary.from_outcomes(outcomes)

        logger.info(
            "dispatch.fanout_completed",
            extra={
                "review_id_hash": hash_for_log(review.id),
                "success_count": summary.success_count,
                "fail_count": summary.fail_count,
            },
        )
        return summary

    async def _authenticate(self, authorization: str | None) -> VerifiedUser:
        if not authorization or not authorization.strip():
            logger.warning("dispatch.missing_credentials")
            raise AuthenticationAppError(code="unauthorized", message="Unauthorized")

        user = await self._identity.verify(authorization)
        if user is None:
            logger.warning("dispatch.invalid_credentials")
            raise AuthenticationAppError(code="unauthorized", message="Unauthorized")

        logger.info("dispatch.authenticated", extra={"user_id_hash": hash_for_log(user.id)})
        return user

    def _require_transport(self) -> AbstractMailTransport:
        if self._transport is None:
            logger.error("dispatch.transport_not_configured", extra={"setting": "RESEND_API_KEY"})
            raise ServiceUnavailableAppError(
                code="email_not_configured",
                message="Email service not configured",
            )
        return self._transport

    def _parse_request(self, body: bytes) -> NotificationRequest:
        try:
            return NotificationRequest.model_validate_json(body or b"{}")
        except ValidationError as exc:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
            raise ValidationAppError(
                code="invalid_request",
                message="Missing required field: reviewId",
                details={"context": {"fields": fields}},
            ) from exc

    async def _fetch_owned_review(self, review_id: str, user: VerifiedUser) -> ReviewRecord:
        review = await self._reviews.get_review(review_id)
        if review is None:
            logger.warning("dispatch.review_not_found", extra={"review_id_hash": hash_for_log(review_id)})
            raise NotFoundAppError(code="review_not_found", message="Review not found")

        if review.user_id != user.id:
            logger.warning(
                "dispatch.ownership_mismatch",
                extra={
                    "user_id_hash": hash_for_log(user.id),
                    "owner_id_hash": hash_for_log(review.user_id),
                    "review_id_hash": hash_for_log(review_id),
                },
            )
            raise AuthorizationAppError(code="forbidden", message="Forbidden")

        logger.info(
            "dispatch.review_verified",
            extra={"review_id_hash": hash_for_log(review_id), "rating": review.rating},
        )
        return review

    async def _deliver(self, transport: AbstractMailTransport, message: EmailMessage) -> None:
        await asyncio.wait_for(transport.send(message), timeout=self._delivery_timeout)

    async def _fan_out(
        self,
        transport: AbstractMailTransport,
        messages: Sequence[EmailMessage],
    ) -> list[DispatchOutcome]:
        """Deliver all messages concurrently and wait until every attempt settles."""
        results = await asyncio.gather(
            *(self._deliver(transport, message) for message in messages),
            return_exceptions=True,
        )

        outcomes: list[DispatchOutcome] = []
        for index, (message, result) in enumerate(zip(messages, results)):
            if not isinstance(result, BaseException):
                outcomes.append(DispatchOutcome(recipient=message.to, delivered=True))
                continue

            if isinstance(result, asyncio.CancelledError):
                reason = "cancelled"
            elif isinstance(result, asyncio.TimeoutError):
                reason = f"timed out after {self._delivery_timeout}s"
            elif isinstance(result, MailDeliveryError):
                reason = result.reason
            else:
                reason = f"{type(result).__name__}: {result}"

            logger.error(
                "dispatch.delivery_failed",
                extra={"recipient_index": index, "reason": reason},
            )
            outcomes.append(DispatchOutcome(recipient=message.to, delivered=False, reason=reason))

        return outcomes
