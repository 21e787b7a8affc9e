from __future__ import annotations

from limits import parse
from limits.storage import MemoryStorage, Storage
from limits.strategies import MovingWindowRateLimiter


class MovingWindowAttemptLimiter:
    """
    Counts attempts per key inside a moving window ("5/15 minutes").

    Backed by `limits` in-memory storage, which expires keys once their window
    has passed, so memory stays bounded by the number of active keys.
    """

    def __init__(self, limit: str, *, namespace: str, storage: Storage | None = None) -> None:
        self._limit = parse(limit)
        self._namespace = namespace
        self._limiter = MovingWindowRateLimiter(storage or MemoryStorage())

    @property
    def limit(self) -> str:
        return str(self._limit)

    def hit(self, key: str) -> bool:
        return self._limiter.hit(self._limit, self._namespace, key)

    def is_blocked(self, key: str) -> bool:
        return not self._limiter.test(self._limit, self._namespace, key)

    def reset(self, key: str) -> None:
        self._limiter.clear(self._limit, self._namespace, key)
