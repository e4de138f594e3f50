from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class EmailMessage:
    """A single-recipient email ready to hand to a transport."""

    to: str
    subject: str
    html: str
    from_address: str


class MailDeliveryError(Exception):
    """Raised by transports when a message was not accepted."""

    def __init__(self, reason: str, *, http_status: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.http_status = http_status


class AbstractMailTransport(ABC):
    """Interface for services that deliver one email per call."""

    @abstractmethod
    async def send(self, message: EmailMessage) -> None:
        """Deliver ``message``.

        Raises:
            MailDeliveryError: If the provider rejects the message.
            httpx.HTTPError: On transport-level failures.
        """
        ...
