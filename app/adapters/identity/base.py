from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class VerifiedUser:
    """Caller identity confirmed by the identity provider."""

    id: str
    email: str | None = None


class AbstractIdentityVerifier(ABC):
    """Interface for exchanging a bearer credential for a verified user."""

    @abstractmethod
    async def verify(self, authorization: str) -> VerifiedUser | None:
        """Verify the raw ``Authorization`` header value.

        Args:
            authorization: Header value as sent by the caller (``Bearer <jwt>``).

        Returns:
            The verified user, or None when the credential is rejected.
        """
        ...
