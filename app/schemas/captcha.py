"""Pydantic schemas for captcha verification."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CaptchaVerifyRequest(BaseModel):
    token: str | None = Field(
        None,
        description="reCAPTCHA v3 token produced by the browser widget.",
    )


class CaptchaVerifyResponse(BaseModel):
    """Outcome of a token check; ``score`` is present whenever Google returned one."""

    success: bool
    score: float | None = None
    error: str | None = None
    codes: list[str] | None = None
