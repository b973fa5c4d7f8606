"""Rate limiter tests."""

import pytest

from wedding_outreach.services.rate_limit import (
    PURGE_INTERVAL,
    RATE_LIMITS,
    InMemoryRateLimitStore,
    RateLimitConfig,
    RateLimiter,
)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock) -> RateLimiter:
    return RateLimiter(clock=clock)


class TestRateLimiter:
    """Tests for RateLimiter.check()."""

    def test_allows_up_to_limit(self, limiter):
        config = RateLimitConfig(max_requests=3, window_seconds=60)

        results = [limiter.check("user-1", config) for _ in range(4)]

        assert [r.allowed for r in results] == [True, True, True, False]
        assert [r.remaining for r in results] == [2, 1, 0, 0]

    def test_window_resets(self, limiter, clock):
        config = RateLimitConfig(max_requests=1, window_seconds=60)

        assert limiter.check("user-1", config).allowed
        assert not limiter.check("user-1", config).allowed

        clock.now += 60
        result = limiter.check("user-1", config)

        assert result.allowed
        assert result.reset_at == clock.now + 60

    def test_identifiers_are_independent(self, limiter):
        config = RateLimitConfig(max_requests=1, window_seconds=60)

        assert limiter.check("user-1", config).allowed
        assert limiter.check("user-2", config).allowed

    def test_headers(self, limiter, clock):
        result = limiter.check("user-1", RATE_LIMITS["AI_GENERATION"])

        assert result.headers() == {
            "X-RateLimit-Limit": "10",
            "X-RateLimit-Remaining": "9",
            "X-RateLimit-Reset": str(int(clock.now + 60)),
        }

    def test_store_is_injected(self, clock):
        store = InMemoryRateLimitStore()
        first = RateLimiter(store, clock=clock)
        second = RateLimiter(store, clock=clock)
        config = RateLimitConfig(max_requests=1, window_seconds=60)

        assert first.check("user-1", config).allowed
        assert not second.check("user-1", config).allowed

    def test_empty_injected_store_is_kept(self, clock):
        store = InMemoryRateLimitStore()

        assert RateLimiter(store, clock=clock).store is store

    def test_expired_entries_purged(self, limiter, clock):
        config = RateLimitConfig(max_requests=1000, window_seconds=10)
        limiter.check("stale", config)
        clock.now += 20

        for _ in range(PURGE_INTERVAL - 1):
            limiter.check("active", config)

        assert limiter.store.get("stale") is None
        assert len(limiter.store) == 1

    def test_default_limits(self):
        assert RATE_LIMITS["EMAIL_SEND"] == RateLimitConfig(max_requests=50, window_seconds=3600)
        assert RATE_LIMITS["CHAT"].max_requests == 30
