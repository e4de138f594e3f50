from __future__ import annotations

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe that also reports which integrations are configured.

    Only booleans are returned; no keys or addresses.
    """

    return {
        "status": "ok",
        "email_configured": bool(settings.mail.api_key),
        "captcha_configured": bool(settings.captcha.secret_key),
    }
