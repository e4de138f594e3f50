"""reCAPTCHA v3 verification service.

A token passes when Google reports success and the score reaches the
configured threshold (0.0 = likely bot, 1.0 = likely human).
"""

from __future__ import annotations

import logging

from app.adapters.captcha.recaptcha_client import RecaptchaClient
from app.core.errors import ServiceUnavailableAppError
from app.schemas.captcha import CaptchaVerifyResponse

logger = logging.getLogger(__name__)


class CaptchaService:
    def __init__(self, client: RecaptchaClient | None, *, score_threshold: float = 0.5) -> None:
        self._client = client
        self._threshold = score_threshold

    async def verify(self, token: str) -> CaptchaVerifyResponse:
        """Check a token and classify the verdict.

        Raises:
            ServiceUnavailableAppError: If no secret key is configured.
            UpstreamAppError: If Google cannot be reached.
        """
        if self._client is None:
            logger.error("captcha.secret_not_configured", extra={"setting": "RECAPTCHA_SECRET_KEY"})
            raise ServiceUnavailableAppError(
                code="captcha_not_configured",
                message="Server configuration error",
            )

        result = await self._client.siteverify(token)
        score = result.get("score")

        if result.get("success") and isinstance(score, (int, float)):
            if score >= self._threshold:
                logger.info("captcha.verified", extra={"score": score})
                return CaptchaVerifyResponse(success=True, score=score)
            logger.warning("captcha.low_score", extra={"score": score, "threshold": self._threshold})
            return CaptchaVerifyResponse(success=False, error="Low confidence score", score=score)

        codes = result.get("error-codes") or []
        logger.warning("captcha.rejected", extra={"codes": codes})
        return CaptchaVerifyResponse(success=False, error="Verification failed", codes=list(codes))
