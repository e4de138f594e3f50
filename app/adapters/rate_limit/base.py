"""Rate limit state store interface.

The guard depends on this abstraction (not the concrete implementation) so the
storage slot can be swapped (memory, local file, shared cache) freely.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RateLimitState:
    """Attempts made by one identity in its current window.

    Attributes:
        attempt_count: Attempts recorded since ``window_start``.
        window_start: Epoch milliseconds when the current window began.
    """

    attempt_count: int
    window_start: int

    def to_dict(self) -> dict[str, int]:
        return {"attempts": self.attempt_count, "windowStart": self.window_start}

    @classmethod
    def from_dict(cls, data: Any) -> "RateLimitState":
        """Build a state from its stored form.

        Raises:
            ValueError: If the payload is not a well-formed state.
        """
        if not isinstance(data, dict):
            raise ValueError("rate limit state must be an object")
        attempts = data.get("attempts")
        window_start = data.get("windowStart")
        if isinstance(attempts, bool) or not isinstance(attempts, int) or attempts < 0:
            raise ValueError("attempts must be a non-negative integer")
        if isinstance(window_start, bool) or not isinstance(window_start, (int, float)):
            raise ValueError("windowStart must be a timestamp")
        return cls(attempt_count=attempts, window_start=int(window_start))


class AbstractStateStore(ABC):
    """Per-identity key/value slot for ``RateLimitState``.

    Implementations may raise on I/O or decoding problems; callers that need
    fail-open behavior are expected to catch those errors.
    """

    @abstractmethod
    def get(self, key: str) -> RateLimitState | None:
        """Return the stored state for ``key`` or None when absent."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, state: RateLimitState) -> None:
        """Persist ``state`` under ``key``, replacing any previous value."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the state stored under ``key`` (no-op when absent)."""
        raise NotImplementedError
