"""Tests for finboard.ratelimit."""

import threading

import pytest

from finboard.config import DEFAULT_CONFIG
from finboard.ratelimit import (
    RateLimiterRegistry,
    RateLimitResult,
    create_limiter,
    get_client_identifier,
    limiter_from_config,
    rejection_message,
)


class FakeClock:
    """Manually advanced clock returning milliseconds."""

    def __init__(self, start: float = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds * 1000


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry(clock: FakeClock) -> RateLimiterRegistry:
    return RateLimiterRegistry(clock=clock)


class TestCheck:
    """Tests for RateLimiter.check."""

    def test_allows_under_limit(self, registry: RateLimiterRegistry) -> None:
        """Should allow requests up to the limit with decreasing remaining."""
        limiter = registry.create("test-allow", limit=3, window_seconds=60)

        results = [limiter.check("user-1") for _ in range(3)]

        assert [r.allowed for r in results] == [True, True, True]
        assert [r.remaining for r in results] == [2, 1, 0]
        assert all(r.retry_after_seconds == 0 for r in results)

    def test_blocks_over_limit(self, registry: RateLimiterRegistry) -> None:
        """Should reject once the window is full."""
        limiter = registry.create("test-block", limit=2, window_seconds=60)

        limiter.check("user-1")
        limiter.check("user-1")
        result = limiter.check("user-1")

        assert result.allowed is False
        assert result.remaining == 0
        assert 0 < result.retry_after_seconds <= 60

    def test_resets_after_window(self, registry: RateLimiterRegistry, clock: FakeClock) -> None:
        """Should allow a blocked identifier again once the window passes."""
        limiter = registry.create("test-reset", limit=1, window_seconds=10)

        assert limiter.check("user-1").allowed is True
        assert limiter.check("user-1").allowed is False

        clock.advance(11)

        assert limiter.check("user-1").allowed is True

    def test_window_boundary(self, registry: RateLimiterRegistry, clock: FakeClock) -> None:
        """Should expire a timestamp only once it is a full window old."""
        limiter = registry.create("test-boundary", limit=1, window_seconds=60)
        limiter.check("user-1")

        clock.now += 59_999
        assert limiter.check("user-1").allowed is False

        clock.now += 1
        assert limiter.check("user-1").allowed is True

    def test_rejected_attempts_not_recorded(self, registry: RateLimiterRegistry, clock: FakeClock) -> None:
        """Should not extend the block with rejected attempts."""
        limiter = registry.create("test-rejected", limit=1, window_seconds=10)
        limiter.check("user-1")

        clock.advance(5)
        assert limiter.check("user-1").allowed is False

        clock.advance(5)
        assert limiter.check("user-1").allowed is True

    def test_independent_identifiers(self, registry: RateLimiterRegistry) -> None:
        """Should track different identifiers separately."""
        limiter = registry.create("test-users", limit=1, window_seconds=60)

        assert limiter.check("user-A").allowed is True
        assert limiter.check("user-B").allowed is True
        assert limiter.check("user-A").allowed is False
        assert limiter.check("user-B").allowed is False

    def test_independent_limiter_names(self, registry: RateLimiterRegistry) -> None:
        """Should keep separate stores for different limiter names."""
        limiter_a = registry.create("route-a", limit=1, window_seconds=60)
        limiter_b = registry.create("route-b", limit=1, window_seconds=60)

        limiter_a.check("user-1")

        assert limiter_b.check("user-1").allowed is True

    def test_same_name_shares_store(self, registry: RateLimiterRegistry) -> None:
        """Should not reset quota when a limiter is created again with the same name."""
        registry.create("shared", limit=1, window_seconds=60).check("user-1")

        again = registry.create("shared", limit=1, window_seconds=60)

        assert again.check("user-1").allowed is False

    def test_retry_after_seconds(self, registry: RateLimiterRegistry, clock: FakeClock) -> None:
        """Should report the time until the oldest request leaves the window."""
        limiter = registry.create("test-retry", limit=1, window_seconds=30)
        limiter.check("user-1")

        clock.advance(10)
        result = limiter.check("user-1")

        assert result.allowed is False
        assert result.retry_after_seconds == 20

    def test_retry_after_rounds_up(self, registry: RateLimiterRegistry, clock: FakeClock) -> None:
        """Should round partial seconds up."""
        limiter = registry.create("test-ceil", limit=1, window_seconds=30)
        limiter.check("user-1")

        clock.advance(10.5)

        assert limiter.check("user-1").retry_after_seconds == 20

    def test_sliding_window_uses_oldest_request(self, registry: RateLimiterRegistry, clock: FakeClock) -> None:
        """Should free one slot at a time as requests age out."""
        limiter = registry.create("test-slide", limit=2, window_seconds=10)
        limiter.check("user-1")
        clock.advance(4)
        limiter.check("user-1")

        clock.advance(4)
        assert limiter.check("user-1").retry_after_seconds == 2

        clock.advance(2)
        result = limiter.check("user-1")
        assert result.allowed is True
        assert result.remaining == 0

    def test_concurrent_checks(self, registry: RateLimiterRegistry) -> None:
        """Should never accept more than the limit across threads."""
        limiter = registry.create("test-threads", limit=50, window_seconds=60)
        results: list[RateLimitResult] = []
        lock = threading.Lock()

        def worker() -> None:
            for _ in range(10):
                result = limiter.check("user-1")
                with lock:
                    results.append(result)

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sum(1 for r in results if r.allowed) == 50


class TestRegistry:
    """Tests for RateLimiterRegistry and create_limiter."""

    def test_reset_single_store(self, registry: RateLimiterRegistry) -> None:
        """Should clear only the named store."""
        limiter_a = registry.create("a", limit=1, window_seconds=60)
        limiter_b = registry.create("b", limit=1, window_seconds=60)
        limiter_a.check("user-1")
        limiter_b.check("user-1")

        registry.reset("a")

        assert limiter_a.check("user-1").allowed is True
        assert limiter_b.check("user-1").allowed is False

    def test_reset_all(self, registry: RateLimiterRegistry) -> None:
        """Should clear every store."""
        limiter = registry.create("a", limit=1, window_seconds=60)
        limiter.check("user-1")

        registry.reset()

        assert limiter.check("user-1").allowed is True

    def test_isolated_registries(self, clock: FakeClock) -> None:
        """Should not share state between registries."""
        first = create_limiter("ocr", 1, 60, registry=RateLimiterRegistry(clock=clock))
        second = create_limiter("ocr", 1, 60, registry=RateLimiterRegistry(clock=clock))

        first.check("user-1")

        assert second.check("user-1").allowed is True

    def test_limiter_from_config(self, registry: RateLimiterRegistry) -> None:
        """Should build a limiter from a configured preset."""
        limiter = limiter_from_config("stock-prices", DEFAULT_CONFIG, registry)

        assert limiter.limit == 10
        assert limiter.window_seconds == 60

    def test_limiter_from_config_unknown(self, registry: RateLimiterRegistry) -> None:
        """Should raise KeyError for an unknown preset."""
        with pytest.raises(KeyError):
            limiter_from_config("missing", DEFAULT_CONFIG, registry)


class TestGetClientIdentifier:
    """Tests for get_client_identifier."""

    def test_forwarded_for_first_address(self) -> None:
        """Should use the first x-forwarded-for address."""
        headers = {"x-forwarded-for": " 203.0.113.5 , 10.0.0.1", "x-real-ip": "10.0.0.2"}

        assert get_client_identifier(headers) == "203.0.113.5"

    def test_real_ip_fallback(self) -> None:
        """Should fall back to x-real-ip."""
        assert get_client_identifier({"x-real-ip": "198.51.100.7"}) == "198.51.100.7"

    def test_anonymous_fallback(self) -> None:
        """Should fall back to a shared anonymous key."""
        assert get_client_identifier({}) == "anonymous"

    def test_empty_forwarded_for(self) -> None:
        """Should skip an empty x-forwarded-for header."""
        assert get_client_identifier({"x-forwarded-for": "", "x-real-ip": "198.51.100.7"}) == "198.51.100.7"

    def test_case_insensitive_names(self) -> None:
        """Should match header names regardless of case."""
        assert get_client_identifier({"X-Forwarded-For": "203.0.113.9"}) == "203.0.113.9"


class TestRejectionMessage:
    """Tests for rejection_message."""

    def test_includes_wait_time(self) -> None:
        """Should tell the caller how long to wait."""
        result = RateLimitResult(allowed=False, remaining=0, retry_after_seconds=42)

        assert rejection_message(result) == "Príliš veľa požiadaviek. Skúste znova o 42s."
