"""Factories for review repositories.

Two access paths exist on purpose: the notification dispatcher reads with
the service credential, while the submitting client writes with the anon key
plus the user's own session token.
"""

import logging

from app.adapters.storage.base import AbstractReviewRepository
from app.adapters.storage.supabase_rest import SupabaseReviewRepository
from app.core.config import settings

logger = logging.getLogger(__name__)


def create_review_repository(*, trusted: bool = False) -> AbstractReviewRepository:
    """Build a repository from ``settings.supabase``.

    Args:
        trusted: Read with the service role key (server side only).

    Returns:
        AbstractReviewRepository: Configured repository.
    """
    cfg = settings.supabase
    if trusted:
        if not cfg.service_role_key:
            logger.warning(
                "storage.service_key_missing",
                extra={"fallback": "anon_key"},
            )
        else:
            return SupabaseReviewRepository(
                base_url=cfg.url,
                api_key=cfg.service_role_key,
                timeout_seconds=cfg.timeout_seconds,
            )
    return SupabaseReviewRepository(
        base_url=cfg.url,
        api_key=cfg.anon_key,
        timeout_seconds=cfg.timeout_seconds,
    )
