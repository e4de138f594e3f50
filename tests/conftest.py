"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It sets TESTING so no .env file is loaded, and provides in-memory fakes for
the identity, storage, mail and notification adapters.
"""

import asyncio
import os

# CRITICAL: Set this before any imports that might load settings
os.environ["TESTING"] = "true"
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("SUPABASE_URL", "https://project.supabase.test")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-test-key")

import pytest

from app.adapters.identity.base import AbstractIdentityVerifier, VerifiedUser
from app.adapters.mail.base import AbstractMailTransport, EmailMessage, MailDeliveryError
from app.adapters.notifications.http_client import AbstractNotificationClient
from app.adapters.rate_limit.in_memory import InMemoryStateStore
from app.adapters.storage.base import AbstractReviewRepository
from app.core.errors import UpstreamAppError
from app.schemas.review import ReviewRecord, ReviewSubmission
from app.services.notification_dispatcher import NotificationDispatcher

OWNER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"
REVIEW_ID = "33333333-3333-3333-3333-333333333333"
ORDER_ID = "44444444-4444-4444-4444-444444444444"
ADMINS = ("admin-one@example.com", "admin-two@example.com", "admin-three@example.com")


class FakeIdentityVerifier(AbstractIdentityVerifier):
    """Accepts ``Bearer <user id>`` for the user ids it was given."""

    def __init__(self, known_user_ids: set[str]) -> None:
        self.known_user_ids = known_user_ids
        self.calls: list[str] = []

    async def verify(self, authorization: str) -> VerifiedUser | None:
        self.calls.append(authorization)
        token = authorization.removeprefix("Bearer ").strip()
        if token in self.known_user_ids:
            return VerifiedUser(id=token)
        return None


class FakeReviewRepository(AbstractReviewRepository):
    def __init__(self) -> None:
        self.rows: dict[str, ReviewRecord] = {}
        self.get_calls: list[str] = []
        self.inserted: list[tuple[ReviewSubmission, str]] = []
        self.fail_inserts = False

    async def get_review(self, review_id: str) -> ReviewRecord | None:
        self.get_calls.append(review_id)
        return self.rows.get(review_id)

    async def insert_review(
        self,
        submission: ReviewSubmission,
        *,
        user_id: str,
        access_token: str,
    ) -> ReviewRecord:
        if self.fail_inserts:
            raise UpstreamAppError(
                code="storage_write_failed",
                message="Review could not be stored",
                details={"http_status": 500},
            )
        self.inserted.append((submission, access_token))
        record = ReviewRecord(
            id=f"review-{len(self.inserted)}",
            user_id=user_id,
            customer_name=submission.customer_name,
            rating=submission.rating,
            review_text=submission.review_text,
            order_id=str(submission.order_id),
        )
        self.rows[record.id] = record
        return record


class FakeMailTransport(AbstractMailTransport):
    """Records deliveries; can reject, raise for, cancel or stall chosen recipients."""

    def __init__(self) -> None:
        self.sent: list[EmailMessage] = []
        self.attempted: list[str] = []
        self.rejecting: set[str] = set()
        self.crashing: set[str] = set()
        self.stalling: set[str] = set()
        self.cancelling: set[str] = set()

    async def send(self, message: EmailMessage) -> None:
        self.attempted.append(message.to)
        if message.to in self.stalling:
            await asyncio.sleep(60)
        if message.to in self.rejecting:
            raise MailDeliveryError("Resend rejected message with HTTP 422", http_status=422)
        if message.to in self.crashing:
            raise ConnectionError("connection reset by peer")
        if message.to in self.cancelling:
            raise asyncio.CancelledError()
        self.sent.append(message)


class FakeNotificationClient(AbstractNotificationClient):
    """Records calls; optionally waits on ``gate`` before answering."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.error: Exception | None = None
        self.result: object = {"success": True, "successCount": 2, "failCount": 0}
        self.gate: asyncio.Event | None = None

    async def notify_review(self, review_id: str, *, access_token: str) -> dict:
        self.calls.append((review_id, access_token))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


def make_review(**overrides) -> ReviewRecord:
    data = {
        "id": REVIEW_ID,
        "user_id": OWNER_ID,
        "customer_name": "Jane Doe",
        "rating": 4,
        "review_text": "Fast publishing and great support.",
        "order_id": ORDER_ID,
    }
    data.update(overrides)
    return ReviewRecord(**data)


@pytest.fixture
def identity() -> FakeIdentityVerifier:
    return FakeIdentityVerifier({OWNER_ID, OTHER_USER_ID})


@pytest.fixture
def reviews() -> FakeReviewRepository:
    repo = FakeReviewRepository()
    review = make_review()
    repo.rows[review.id] = review
    return repo


@pytest.fixture
def mail() -> FakeMailTransport:
    return FakeMailTransport()


@pytest.fixture
def notifier() -> FakeNotificationClient:
    return FakeNotificationClient()


@pytest.fixture
def state_store() -> InMemoryStateStore:
    return InMemoryStateStore()


@pytest.fixture
def dispatcher(identity, reviews, mail) -> NotificationDispatcher:
    return NotificationDispatcher(
        identity=identity,
        reviews=reviews,
        transport=mail,
        recipients=ADMINS,
        from_address="Store <noreply@example.com>",
        admin_panel_url="https://store.example.com/admin",
        delivery_timeout_seconds=0.2,
    )
