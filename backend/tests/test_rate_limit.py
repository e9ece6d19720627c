"""Tests for the token bucket rate limiter."""

from vibe_awards.core.rate_limit import ClientRateLimiter, TokenBucket


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestTokenBucket:

    def test_burst_then_reject(self):
        clock = FakeClock()
        bucket = TokenBucket(rate=1.0, capacity=3, clock=clock)

        assert [bucket.try_acquire() for _ in range(4)] == [True, True, True, False]

    def test_refills_over_time(self):
        clock = FakeClock()
        bucket = TokenBucket(rate=2.0, capacity=2, clock=clock)
        bucket.try_acquire()
        bucket.try_acquire()
        assert not bucket.try_acquire()

        clock.now += 0.5
        assert bucket.try_acquire()
        assert not bucket.try_acquire()

    def test_never_exceeds_capacity(self):
        clock = FakeClock()
        bucket = TokenBucket(rate=10.0, capacity=2, clock=clock)
        clock.now += 100
        assert bucket.is_full
        assert bucket.tokens == 2


class TestClientRateLimiter:

    def test_clients_are_independent(self):
        clock = FakeClock()
        limiter = ClientRateLimiter(max_requests=2, window_seconds=60, clock=clock)

        assert limiter.allow("1.1.1.1")
        assert limiter.allow("1.1.1.1")
        assert not limiter.allow("1.1.1.1")
        assert limiter.allow("2.2.2.2")

    def test_budget_returns_after_window(self):
        clock = FakeClock()
        limiter = ClientRateLimiter(max_requests=2, window_seconds=60, clock=clock)
        limiter.allow("1.1.1.1")
        limiter.allow("1.1.1.1")
        assert not limiter.allow("1.1.1.1")

        clock.now += 60
        assert limiter.allow("1.1.1.1")

    def test_sweep_drops_idle_clients(self):
        clock = FakeClock()
        limiter = ClientRateLimiter(max_requests=5, window_seconds=10, clock=clock)
        limiter.allow("idle")
        clock.now += 10

        for _ in range(ClientRateLimiter.SWEEP_EVERY):
            limiter.allow("busy")
            clock.now += 10

        assert "idle" not in limiter._buckets

    def test_unknown_client_shares_a_bucket(self):
        limiter = ClientRateLimiter(max_requests=1, window_seconds=60, clock=FakeClock())
        assert limiter.allow(None)
        assert not limiter.allow(None)
