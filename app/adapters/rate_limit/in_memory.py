"""In-memory state store.

Notes:
- Per-process only: state is lost on restart.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import threading

from app.adapters.rate_limit.base import AbstractStateStore, RateLimitState


class InMemoryStateStore(AbstractStateStore):
    """Dictionary-backed store, used in tests and single-process setups."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._states: dict[str, RateLimitState] = {}

    def get(self, key: str) -> RateLimitState | None:
        with self._lock:
            return self._states.get(key)

    def set(self, key: str, state: RateLimitState) -> None:
        with self._lock:
            self._states[key] = state

    def delete(self, key: str) -> None:
        with self._lock:
            self._states.pop(key, None)
