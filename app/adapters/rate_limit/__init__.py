"""Rate limit state stores.

The guard only depends on ``AbstractStateStore`` so the per-identity slot can
live in process memory, in a local JSON file, or in any other durable
key/value store without changing the guard itself.
"""

from app.adapters.rate_limit.base import AbstractStateStore, RateLimitState
from app.adapters.rate_limit.in_memory import InMemoryStateStore
from app.adapters.rate_limit.json_file import JsonFileStateStore

__all__ = [
    "AbstractStateStore",
    "InMemoryStateStore",
    "JsonFileStateStore",
    "RateLimitState",
]
