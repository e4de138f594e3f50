"""Captcha verification adapters."""

from app.adapters.captcha.recaptcha_client import RecaptchaClient

__all__ = ["RecaptchaClient"]
