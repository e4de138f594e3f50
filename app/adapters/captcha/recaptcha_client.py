"""Google reCAPTCHA ``siteverify`` adapter."""

from __future__ import annotations

from typing import Any

import httpx

from app.core.errors import UpstreamAppError


class RecaptchaClient:
    """Thin client over the reCAPTCHA token verification endpoint."""

    def __init__(
        self,
        secret_key: str,
        *,
        verify_url: str = "https://www.google.com/recaptcha/api/siteverify",
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.secret_key = secret_key
        self.verify_url = verify_url
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def siteverify(self, token: str) -> dict[str, Any]:
        """Verify ``token`` and return Google's JSON verdict.

        Raises:
            UpstreamAppError: If Google cannot be reached or answers with
                something other than a JSON object.
        """
        form = {"secret": self.secret_key, "response": token}
        try:
            if self._client is not None:
                response = await self._client.post(
                    self.verify_url, data=form, timeout=self.timeout_seconds
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await client.post(self.verify_url, data=form)
            result = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamAppError(
                code="captcha_unavailable",
                message="Captcha verification service is unavailable",
                details={"context": {"error_type": type(exc).__name__}},
            ) from exc

        if not isinstance(result, dict):
            raise UpstreamAppError(
                code="captcha_unavailable",
                message="Captcha verification service is unavailable",
            )
        return result
