"""Supabase PostgREST adapter for the ``reviews`` table."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from app.adapters.storage.base import AbstractReviewRepository
from app.core.errors import UpstreamAppError
from app.core.logging import hash_for_log
from app.schemas.review import ReviewRecord, ReviewSubmission

logger = logging.getLogger(__name__)

REVIEW_COLUMNS = "id,user_id,customer_name,rating,review_text,order_id"

# PostgREST answers these for ids it cannot match (e.g. not a uuid)
_NOT_FOUND_STATUSES = {400, 404, 406}


class SupabaseReviewRepository(AbstractReviewRepository):
    """Reads and writes reviews through the Supabase REST interface.

    Reads use the key the repository was built with (the dispatcher passes
    the service credential). Inserts are made with the end user's token so
    row-level security applies to them.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        *,
        read_token: str | None = None,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.read_token = read_token or api_key
        self.timeout_seconds = timeout_seconds
        self._client = client

    @property
    def table_url(self) -> str:
        return f"{self.base_url}/rest/v1/reviews"

    def _headers(self, bearer: str | None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    async def _request(self, method: str, **kwargs: Any) -> httpx.Response:
        try:
            if self._client is not None:
                return await self._client.request(
                    method, self.table_url, timeout=self.timeout_seconds, **kwargs
                )
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                return await client.request(method, self.table_url, **kwargs)
        except httpx.HTTPError as exc:
            raise UpstreamAppError(
                code="storage_unreachable",
                message="Review storage could not be reached",
                details={"context": {"error_type": type(exc).__name__}},
            ) from exc

    def _parse_row(self, row: Any) -> ReviewRecord:
        try:
            return ReviewRecord.model_validate(row)
        except ValidationError as exc:
            raise UpstreamAppError(
                code="storage_invalid_row",
                message="Review storage returned an unexpected row",
            ) from exc

    async def get_review(self, review_id: str) -> ReviewRecord | None:
        response = await self._request(
            "GET",
            params={"id": f"eq.{review_id}", "select": REVIEW_COLUMNS, "limit": "1"},
            headers=self._headers(self.read_token),
        )

        if response.status_code in _NOT_FOUND_STATUSES:
            logger.info(
                "storage.review_lookup_rejected",
                extra={"http_status": response.status_code, "review_id_hash": hash_for_log(review_id)},
            )
            return None
        if response.is_error:
            raise UpstreamAppError(
                code="storage_read_failed",
                message="Review storage returned an error",
                details={"http_status": response.status_code},
            )

        rows = response.json()
        if not rows:
            return None
        return self._parse_row(rows[0] if isinstance(rows, list) else rows)

    async def insert_review(
        self,
        submission: ReviewSubmission,
        *,
        user_id: str,
        access_token: str,
    ) -> ReviewRecord:
        headers = self._headers(access_token)
        headers["Prefer"] = "return=representation"
        response = await self._request(
            "POST",
            params={"select": REVIEW_COLUMNS},
            json=submission.to_row(user_id),
            headers=headers,
        )

        if response.is_error:
            raise UpstreamAppError(
                code="storage_write_failed",
                message="Review could not be stored",
                details={"http_status": response.status_code},
            )

        rows = response.json()
        if not rows:
            raise UpstreamAppError(
                code="storage_write_failed",
                message="Review storage did not return the stored row",
            )
        return self._parse_row(rows[0] if isinstance(rows, list) else rows)
