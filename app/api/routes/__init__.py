from __future__ import annotations

from app.api.routes.captcha import router as captcha_router
from app.api.routes.health import router as health_router
from app.api.routes.notifications import router as notifications_router

__all__ = ["captcha_router", "health_router", "notifications_router"]
