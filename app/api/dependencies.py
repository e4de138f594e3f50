"""FastAPI dependencies that build services from settings.

Instances are cached in-module so adapters are created once per process.
Tests replace them through ``app.dependency_overrides``.
"""

from __future__ import annotations

from app.adapters.captcha.recaptcha_client import RecaptchaClient
from app.adapters.identity.factory import create_identity_verifier
from app.adapters.mail.factory import create_mail_transport
from app.adapters.storage.factory import create_review_repository
from app.core.config import settings
from app.services.captcha import CaptchaService
from app.services.notification_dispatcher import NotificationDispatcher

_dispatcher: NotificationDispatcher | None = None
_captcha_service: CaptchaService | None = None


def get_notification_dispatcher() -> NotificationDispatcher:
    """Return the process-wide review notification dispatcher."""

    global _dispatcher

    if _dispatcher is None:
        _dispatcher = NotificationDispatcher(
            identity=create_identity_verifier(),
            reviews=create_review_repository(trusted=True),
            transport=create_mail_transport(),
            recipients=settings.mail.admin_emails,
            from_address=settings.mail.from_address,
            admin_panel_url=settings.mail.admin_panel_url,
            delivery_timeout_seconds=settings.mail.timeout_seconds,
        )
    return _dispatcher


def get_captcha_service() -> CaptchaService:
    """Return the process-wide captcha service."""

    global _captcha_service

    if _captcha_service is None:
        client = None
        if settings.captcha.secret_key:
            client = RecaptchaClient(
                settings.captcha.secret_key,
                verify_url=settings.captcha.verify_url,
                timeout_seconds=settings.captcha.timeout_seconds,
            )
        _captcha_service = CaptchaService(client, score_threshold=settings.captcha.score_threshold)
    return _captcha_service
