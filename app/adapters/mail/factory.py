"""Factory for the outbound mail transport."""

from __future__ import annotations

import logging

from app.adapters.mail.base import AbstractMailTransport
from app.adapters.mail.resend_client import ResendMailTransport
from app.core.config import settings

logger = logging.getLogger(__name__)


def create_mail_transport() -> AbstractMailTransport | None:
    """Build the Resend transport, or None when no API key is configured.

    Callers decide how to report the missing configuration; the review
    notification endpoint turns it into a service-unavailable error.
    """
    if not settings.mail.api_key:
        logger.warning("mail.transport_not_configured", extra={"setting": "RESEND_API_KEY"})
        return None

    return ResendMailTransport(
        api_key=settings.mail.api_key,
        api_url=settings.mail.api_url,
        timeout_seconds=settings.mail.timeout_seconds,
    )
