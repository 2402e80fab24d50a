"""In-memory rate limiter for public lead capture."""

from __future__ import annotations

import asyncio
import time
from collections import deque
from dataclasses import dataclass, field

from ..config import CRMSettings


@dataclass
class _Bucket:
    hits: deque[float] = field(default_factory=deque)
    blocked_until: float = 0.0


class SlidingWindowRateLimiter:
    """Per-client sliding window. A client over the limit is blocked for a while.

    Buckets that have gone quiet are dropped on the next sweep, so memory stays
    proportional to the number of recently active clients.
    """

    def __init__(self, settings_obj: CRMSettings, clock=time.monotonic) -> None:
        self._window = settings_obj.capture_rate_limit_window_seconds
        self._limit = settings_obj.capture_rate_limit_max_submissions
        self._block_seconds = settings_obj.capture_rate_limit_block_seconds
        self._clock = clock
        self._buckets: dict[str, _Bucket] = {}
        self._lock = asyncio.Lock()

    def _sweep(self, now: float) -> None:
        cutoff = now - self._window
        idle = [
            key for key, bucket in self._buckets.items()
            if bucket.blocked_until <= now and (not bucket.hits or bucket.hits[-1] <= cutoff)
        ]
        for key in idle:
            del self._buckets[key]

    async def allow(self, key: str) -> tuple[bool, int]:
        """Return (allowed, retry_after_seconds) and record the hit if allowed."""
        if self._limit <= 0:
            return True, 0

        async with self._lock:
            now = self._clock()
            self._sweep(now)
            bucket = self._buckets.setdefault(key, _Bucket())

            if now < bucket.blocked_until:
                return False, max(1, int(bucket.blocked_until - now))

            cutoff = now - self._window
            while bucket.hits and bucket.hits[0] <= cutoff:
                bucket.hits.popleft()

            if len(bucket.hits) >= self._limit:
                bucket.blocked_until = now + self._block_seconds
                return False, max(1, int(self._block_seconds))

            bucket.hits.append(now)
            return True, 0

    def __len__(self) -> int:
        return len(self._buckets)
