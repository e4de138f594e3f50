"""Invokes the review notification endpoint on behalf of a signed-in user."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx

from app.core.errors import UpstreamAppError


class AbstractNotificationClient(ABC):
    """Interface used by the submission flow to request admin notifications."""

    @abstractmethod
    async def notify_review(self, review_id: str, *, access_token: str) -> dict[str, Any]:
        """Ask the server to notify admins about ``review_id``.

        Only the id is sent. The server re-reads and re-authorizes the
        review itself.

        Returns:
            The endpoint's JSON response.

        Raises:
            UpstreamAppError: If the endpoint cannot be reached or refuses.
        """
        ...


class HttpNotificationClient(AbstractNotificationClient):
    """Calls ``POST {functions_url}/notifications/review`` over HTTP."""

    def __init__(
        self,
        functions_url: str,
        *,
        anon_key: str | None = None,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.endpoint = f"{functions_url.rstrip('/')}/notifications/review"
        self.anon_key = anon_key
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def notify_review(self, review_id: str, *, access_token: str) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {access_token}"}
        if self.anon_key:
            headers["apikey"] = self.anon_key
        body = {"reviewId": review_id}

        try:
            if self._client is not None:
                response = await self._client.post(
                    self.endpoint, json=body, headers=headers, timeout=self.timeout_seconds
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await client.post(self.endpoint, json=body, headers=headers)
        except httpx.HTTPError as exc:
            raise UpstreamAppError(
                code="notification_unreachable",
                message="Notification endpoint could not be reached",
                details={"context": {"error_type": type(exc).__name__}},
            ) from exc

        if response.is_error:
            raise UpstreamAppError(
                code="notification_rejected",
                message="Notification endpoint refused the request",
                details={"http_status": response.status_code},
            )

        try:
            summary = response.json()
        except ValueError:
            summary = None
        if not isinstance(summary, dict):
            raise UpstreamAppError(
                code="notification_invalid_response",
                message="Notification endpoint returned an unreadable summary",
                details={"http_status": response.status_code},
            )
        return summary
