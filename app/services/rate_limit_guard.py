"""Per-identity fixed-window submission guard.

Answers "may this visitor submit again right now?" without a server round
trip. The guard is a usability throttle, not a security boundary: any
problem reading or writing its state store is treated as "no prior state",
so it always fails open.

Typical use from a form:
    guard = RateLimitGuard(config, store)
    if guard.check_limit():
        show_countdown(guard.remaining_seconds)
    else:
        ...write the review...
        guard.record_attempt()

``check_limit`` is cheap and meant to be polled (e.g. once a second) to keep
a countdown current.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import AbstractStateStore, RateLimitState
from app.core.logging import hash_for_log

logger = logging.getLogger(__name__)

REVIEW_KEY_PREFIX = "review_rate_limit_"
GUEST_IDENTITY = "guest"


def _now_ms() -> int:
    return int(time.time() * 1000)


def review_identity_key(user_id: str | None) -> str:
    """Storage key for a user's review quota (shared slot for anonymous visitors)."""
    return f"{REVIEW_KEY_PREFIX}{user_id or GUEST_IDENTITY}"


@dataclass(frozen=True)
class RateLimitConfig:
    """Immutable limits for one rate-limited subject.

    Attributes:
        max_attempts: Attempts allowed per window.
        window_duration_ms: Window length in milliseconds.
        identity_key: Storage key identifying the subject.
    """

    max_attempts: int
    window_duration_ms: int
    identity_key: str

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.window_duration_ms < 1:
            raise ValueError("window_duration_ms must be >= 1")
        if not self.identity_key:
            raise ValueError("identity_key must be a non-empty string")


class RateLimitGuard:
    """Fixed-window counter over an injected state store.

    Attributes:
        is_limited: True while the identity has used its quota for the
            current window. Updated by every check and recorded attempt.
        remaining_seconds: Whole seconds until the window resets while
            limited, 0 otherwise.
    """

    def __init__(
        self,
        config: RateLimitConfig,
        store: AbstractStateStore,
        *,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        """Initialize the guard.

        Args:
            config: Limits and identity key.
            store: Persistent slot for the identity's state.
            clock: Time source returning epoch milliseconds.
        """
        self._config = config
        self._store = store
        self._clock = clock
        self.is_limited = False
        self.remaining_seconds = 0

    def _load(self, now: int) -> RateLimitState:
        try:
            state = self._store.get(self._config.identity_key)
        except Exception as exc:
            logger.debug(
                "rate_limit.state_unreadable",
                extra={"key_hash": hash_for_log(self._config.identity_key), "error_type": type(exc).__name__},
            )
            state = None
        return state if state is not None else RateLimitState(attempt_count=0, window_start=now)

    def _save(self, state: RateLimitState) -> None:
        try:
            self._store.set(self._config.identity_key, state)
        except Exception as exc:
            logger.debug(
                "rate_limit.state_unwritable",
                extra={"key_hash": hash_for_log(self._config.identity_key), "error_type": type(exc).__name__},
            )

    def _window_elapsed(self, state: RateLimitState, now: int) -> bool:
        return now - state.window_start > self._config.window_duration_ms

    def _seconds_left(self, state: RateLimitState, now: int) -> int:
        elapsed = now - state.window_start
        return math.ceil((self._config.window_duration_ms - elapsed) / 1000)

    def _mark_limited(self, state: RateLimitState, now: int) -> None:
        self.remaining_seconds = self._seconds_left(state, now)
        self.is_limited = True

    def check_limit(self) -> bool:
        """Report whether a new attempt is currently blocked.

        Only the window-reset branch writes to the store; otherwise repeated
        calls leave stored state untouched.

        Returns:
            True when the identity has exhausted its attempts for the window.
        """
        now = self._clock()
        state = self._load(now)

        if self._window_elapsed(state, now):
            self._save(RateLimitState(attempt_count=0, window_start=now))
            self.is_limited = False
            self.remaining_seconds = 0
            return False

        if state.attempt_count >= self._config.max_attempts:
            self._mark_limited(state, now)
            return True

        self.is_limited = False
        return False

    def record_attempt(self) -> None:
        """Count one successful submission against the current window."""
        now = self._clock()
        state = self._load(now)

        if self._window_elapsed(state, now):
            updated = RateLimitState(attempt_count=1, window_start=now)
        else:
            updated = RateLimitState(
                attempt_count=state.attempt_count + 1,
                window_start=state.window_start,
            )
        self._save(updated)

        if updated.attempt_count >= self._config.max_attempts:
            self._mark_limited(updated, now)
            logger.info(
                "rate_limit.limited",
                extra={
                    "key_hash": hash_for_log(self._config.identity_key),
                    "attempts": updated.attempt_count,
                    "retry_after_s": self.remaining_seconds,
                },
            )

    def reset(self) -> None:
        """Forget the identity's state. Administrative/testing use only."""
        try:
            self._store.delete(self._config.identity_key)
        except Exception as exc:
            logger.debug(
                "rate_limit.state_undeletable",
                extra={"key_hash": hash_for_log(self._config.identity_key), "error_type": type(exc).__name__},
            )
        self.is_limited = False
        self.remaining_seconds = 0
