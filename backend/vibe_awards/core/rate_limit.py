"""Token bucket rate limiter for per-client API throttling."""

import time
from typing import Callable, Dict, Optional


class TokenBucket:
    """Token bucket algorithm implementation for rate limiting.

    The bucket starts full and refills at a constant rate.
    Each request consumes one token. Unlike a blocking limiter, an empty
    bucket rejects the request instead of waiting for a refill.
    """

    def __init__(self, rate: float, capacity: float, clock: Callable[[], float] = time.monotonic):
        """Initialize token bucket.

        Args:
            rate: Tokens per second
            capacity: Maximum tokens in bucket (burst capacity)
            clock: Monotonic time source, injectable for tests
        """
        self.rate = rate
        self.capacity = capacity
        self.tokens = capacity
        self._clock = clock
        self.last_refill = clock()

    def _refill(self) -> None:
        """Refill tokens based on elapsed time since last refill."""
        now = self._clock()
        elapsed = now - self.last_refill
        self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
        self.last_refill = now

    def try_acquire(self, tokens: float = 1.0) -> bool:
        """Take tokens if available.

        Returns:
            True if the request may proceed, False if the bucket is empty
        """
        self._refill()
        if self.tokens >= tokens:
            self.tokens -= tokens
            return True
        return False

    @property
    def is_full(self) -> bool:
        self._refill()
        return self.tokens >= self.capacity


class ClientRateLimiter:
    """Per-client rate limiter using one token bucket per client address.

    A client may burst up to max_requests and regains the full budget over
    window_seconds. Buckets that have refilled completely are dropped during
    periodic sweeps so idle clients do not accumulate.
    """

    SWEEP_EVERY = 1000

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._buckets: Dict[str, TokenBucket] = {}
        self._calls = 0

    def _get_bucket(self, client: str) -> TokenBucket:
        bucket = self._buckets.get(client)
        if bucket is None:
            rate = self.max_requests / float(self.window_seconds)
            bucket = TokenBucket(rate=rate, capacity=float(self.max_requests), clock=self._clock)
            self._buckets[client] = bucket
        return bucket

    def _sweep(self) -> None:
        for client in [c for c, b in self._buckets.items() if b.is_full]:
            del self._buckets[client]

    def allow(self, client: Optional[str]) -> bool:
        """Record one request from client and report whether it is allowed."""
        self._calls += 1
        if self._calls % self.SWEEP_EVERY == 0:
            self._sweep()
        return self._get_bucket(client or "unknown").try_acquire()

    def reset(self) -> None:
        self._buckets.clear()
