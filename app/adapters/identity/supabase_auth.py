"""Supabase Auth identity adapter."""

from __future__ import annotations

import logging

import httpx

from app.adapters.identity.base import AbstractIdentityVerifier, VerifiedUser

logger = logging.getLogger(__name__)


class SupabaseIdentityVerifier(AbstractIdentityVerifier):
    """Validates caller JWTs with ``GET /auth/v1/user``.

    The caller's own ``Authorization`` header is forwarded untouched; the
    project anon key is sent as ``apikey`` as Supabase requires.
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str | None,
        *,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def _get_user(self, authorization: str) -> httpx.Response:
        headers = {"Authorization": authorization}
        if self.anon_key:
            headers["apikey"] = self.anon_key
        url = f"{self.base_url}/auth/v1/user"

        if self._client is not None:
            return await self._client.get(url, headers=headers, timeout=self.timeout_seconds)
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            return await client.get(url, headers=headers)

    async def verify(self, authorization: str) -> VerifiedUser | None:
        try:
            response = await self._get_user(authorization)
        except httpx.HTTPError as exc:
            logger.error(
                "identity.request_failed",
                extra={"error_type": type(exc).__name__},
            )
            return None

        if response.status_code != 200:
            logger.info(
                "identity.rejected",
                extra={"http_status": response.status_code},
            )
            return None

        try:
            payload = response.json()
        except ValueError:
            logger.error("identity.invalid_payload")
            return None

        user_id = payload.get("id") if isinstance(payload, dict) else None
        if not user_id:
            return None
        return VerifiedUser(id=str(user_id), email=payload.get("email"))
