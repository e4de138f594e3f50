"""Unit tests for the per-identity review rate limit guard."""

from unittest.mock import Mock

import pytest

from app.adapters.rate_limit.base import AbstractStateStore, RateLimitState
from app.adapters.rate_limit.in_memory import InMemoryStateStore
from app.services.rate_limit_guard import (
    RateLimitConfig,
    RateLimitGuard,
    review_identity_key,
)

HOUR_MS = 60 * 60 * 1000
T0 = 1_700_000_000_000


class BrokenStore(AbstractStateStore):
    """Store whose every operation fails."""

    def get(self, key):
        raise OSError("storage quota exceeded")

    def set(self, key, state):
        raise OSError("storage quota exceeded")

    def delete(self, key):
        raise OSError("storage quota exceeded")


def make_guard(store=None, *, max_attempts=3, window_ms=HOUR_MS, now=T0, key="review_rate_limit_u1"):
    clock = Mock(return_value=now)
    config = RateLimitConfig(max_attempts=max_attempts, window_duration_ms=window_ms, identity_key=key)
    guard = RateLimitGuard(config, store if store is not None else InMemoryStateStore(), clock=clock)
    return guard, clock


def test_unseen_identity_is_not_limited() -> None:
    guard, _ = make_guard()

    assert guard.check_limit() is False
    assert guard.is_limited is False
    assert guard.remaining_seconds == 0


@pytest.mark.parametrize("max_attempts", [1, 2, 3, 5])
def test_limited_exactly_when_quota_used(max_attempts: int) -> None:
    guard, clock = make_guard(max_attempts=max_attempts)

    for k in range(1, max_attempts + 1):
        clock.return_value = T0 + k * 1000
        guard.record_attempt()
        assert guard.check_limit() is (k >= max_attempts)


def test_three_per_hour_reports_remaining_time_then_recovers() -> None:
    guard, clock = make_guard(max_attempts=3, window_ms=HOUR_MS)

    for offset in (0, 10, 20):
        clock.return_value = T0 + offset
        guard.record_attempt()

    clock.return_value = T0 + 500
    assert guard.check_limit() is True
    assert guard.is_limited is True
    assert 3595 <= guard.remaining_seconds <= 3600

    clock.return_value = T0 + HOUR_MS + 1
    assert guard.check_limit() is False
    assert guard.is_limited is False
    assert guard.remaining_seconds == 0


def test_record_attempt_marks_limited_immediately() -> None:
    guard, _ = make_guard(max_attempts=2)

    guard.record_attempt()
    assert guard.is_limited is False

    guard.record_attempt()
    assert guard.is_limited is True
    assert guard.remaining_seconds == 3600


def test_remaining_seconds_rounds_up() -> None:
    guard, clock = make_guard(max_attempts=1, window_ms=10_000)

    guard.record_attempt()
    clock.return_value = T0 + 8_500

    assert guard.check_limit() is True
    assert guard.remaining_seconds == 2


def test_attempts_further_apart_than_window_start_new_window() -> None:
    store = InMemoryStateStore()
    guard, clock = make_guard(store, max_attempts=2, window_ms=10_000)

    guard.record_attempt()
    clock.return_value = T0 + 10_000 + 1
    guard.record_attempt()

    assert store.get("review_rate_limit_u1") == RateLimitState(attempt_count=1, window_start=T0 + 10_001)
    assert guard.check_limit() is False


def test_window_boundary_is_inclusive() -> None:
    guard, clock = make_guard(max_attempts=1, window_ms=10_000)

    guard.record_attempt()
    clock.return_value = T0 + 10_000

    # Exactly one window later is still inside the window
    assert guard.check_limit() is True
    assert guard.remaining_seconds == 0


def test_check_limit_only_writes_when_window_elapsed() -> None:
    store = Mock(wraps=InMemoryStateStore())
    guard, clock = make_guard(store, max_attempts=3, window_ms=10_000)

    guard.record_attempt()
    store.set.reset_mock()

    for _ in range(5):
        guard.check_limit()
    store.set.assert_not_called()

    clock.return_value = T0 + 20_000
    guard.check_limit()
    store.set.assert_called_once_with(
        "review_rate_limit_u1", RateLimitState(attempt_count=0, window_start=T0 + 20_000)
    )


def test_expired_limited_state_resets_on_check() -> None:
    store = InMemoryStateStore()
    store.set("review_rate_limit_u1", RateLimitState(attempt_count=9, window_start=T0 - HOUR_MS - 5))
    guard, _ = make_guard(store)

    assert guard.check_limit() is False
    assert store.get("review_rate_limit_u1") == RateLimitState(attempt_count=0, window_start=T0)


def test_storage_failures_fail_open() -> None:
    guard, _ = make_guard(BrokenStore(), max_attempts=1)

    assert guard.check_limit() is False
    guard.record_attempt()
    guard.reset()
    assert guard.check_limit() is False


def test_reset_clears_state_and_flag() -> None:
    store = InMemoryStateStore()
    guard, _ = make_guard(store, max_attempts=1)

    guard.record_attempt()
    assert guard.check_limit() is True

    guard.reset()
    assert guard.is_limited is False
    assert guard.remaining_seconds == 0
    assert store.get("review_rate_limit_u1") is None
    assert guard.check_limit() is False


def test_identities_are_isolated() -> None:
    store = InMemoryStateStore()
    alice, _ = make_guard(store, max_attempts=1, key=review_identity_key("alice"))
    bob, _ = make_guard(store, max_attempts=1, key=review_identity_key("bob"))

    alice.record_attempt()

    assert alice.check_limit() is True
    assert bob.check_limit() is False


def test_guests_share_one_identity_key() -> None:
    assert review_identity_key(None) == "review_rate_limit_guest"
    assert review_identity_key("") == "review_rate_limit_guest"
    assert review_identity_key("u-1") == "review_rate_limit_u-1"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_attempts": 0, "window_duration_ms": 1000, "identity_key": "k"},
        {"max_attempts": 1, "window_duration_ms": 0, "identity_key": "k"},
        {"max_attempts": 1, "window_duration_ms": 1000, "identity_key": ""},
    ],
)
def test_invalid_config(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        RateLimitConfig(**kwargs)
