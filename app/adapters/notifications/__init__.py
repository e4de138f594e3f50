"""Client for the review notification endpoint."""

from app.adapters.notifications.http_client import (
    AbstractNotificationClient,
    HttpNotificationClient,
)

__all__ = ["AbstractNotificationClient", "HttpNotificationClient"]
