"""Resend email API adapter."""

from __future__ import annotations

from typing import Any

import httpx

from app.adapters.mail.base import AbstractMailTransport, EmailMessage, MailDeliveryError


class ResendMailTransport(AbstractMailTransport):
    """Sends messages with ``POST /emails`` on the Resend API."""

    def __init__(
        self,
        api_key: str,
        *,
        api_url: str = "https://api.resend.com/emails",
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            api_key: Resend API key, sent as a bearer token.
            api_url: Send endpoint.
            timeout_seconds: HTTP timeout per request.
            client: Optional shared client (tests inject a mock transport here).
        """
        self.api_key = api_key
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _payload(self, message: EmailMessage) -> dict[str, Any]:
        return {
            "from": message.from_address,
            "to": [message.to],
            "subject": message.subject,
            "html": message.html,
        }

    async def send(self, message: EmailMessage) -> None:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = self._payload(message)

        if self._client is not None:
            response = await self._client.post(
                self.api_url, json=payload, headers=headers, timeout=self.timeout_seconds
            )
        else:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)

        if response.is_error:
            raise MailDeliveryError(
                f"Resend rejected message with HTTP {response.status_code}",
                http_status=response.status_code,
            )
