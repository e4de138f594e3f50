"""Outbound mail adapter layer."""

from app.adapters.mail.base import AbstractMailTransport, EmailMessage, MailDeliveryError
from app.adapters.mail.factory import create_mail_transport
from app.adapters.mail.resend_client import ResendMailTransport

__all__ = [
    "AbstractMailTransport",
    "EmailMessage",
    "MailDeliveryError",
    "ResendMailTransport",
    "create_mail_transport",
]
