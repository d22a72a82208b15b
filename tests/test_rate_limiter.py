"""Tests for the sliding-window rate limiter."""

import threading
from unittest.mock import patch

import pytest

from conftest import FakeClock
from tiktok_ads_mcp.utils.rate_limiter import RateLimiter


@pytest.fixture
def clock():
    fake = FakeClock()
    with patch("tiktok_ads_mcp.utils.rate_limiter.time", fake):
        yield fake


class TestRateLimiter:
    """Test admission decisions and blocking waits."""

    def test_admits_up_to_max_requests(self, clock):
        limiter = RateLimiter(max_requests=3, window_ms=1000)

        assert [limiter.admit() for _ in range(4)] == [True, True, True, False]
        assert len(limiter.timestamps) == 3

    def test_denied_attempt_is_not_recorded(self, clock):
        limiter = RateLimiter(max_requests=1, window_ms=1000)
        limiter.admit()

        assert limiter.admit() is False
        assert len(limiter.timestamps) == 1

    def test_old_entries_are_pruned(self, clock):
        limiter = RateLimiter(max_requests=2, window_ms=1000)
        limiter.admit()
        clock.now += 0.5
        limiter.admit()

        clock.now += 0.5
        assert limiter.admit() is True
        assert list(limiter.timestamps) == [1000.5, 1001.0]

    def test_wait_time(self, clock):
        limiter = RateLimiter(max_requests=1, window_ms=1000)
        assert limiter.get_wait_time() == 0.0

        limiter.admit()
        clock.now += 0.25
        assert limiter.get_wait_time() == pytest.approx(0.75)

    def test_wait_time_is_zero_once_window_empties(self, clock):
        limiter = RateLimiter(max_requests=1, window_ms=1000)
        limiter.admit()
        clock.now += 5

        assert limiter.get_wait_time() == 0.0
        assert len(limiter.timestamps) == 0

    def test_wait_if_needed_does_not_sleep_with_free_slots(self, clock):
        limiter = RateLimiter(max_requests=2, window_ms=1000)
        limiter.wait_if_needed()
        limiter.wait_if_needed()

        assert clock.sleeps == []

    def test_wait_if_needed_sleeps_until_oldest_entry_expires(self, clock):
        limiter = RateLimiter(max_requests=2, window_ms=1000)
        limiter.admit()
        clock.now += 0.5
        limiter.admit()

        limiter.wait_if_needed()

        assert clock.sleeps == [pytest.approx(0.5)]
        assert len(limiter.timestamps) == 2

    def test_wait_if_needed_polls_at_most_one_second_at_a_time(self, clock):
        limiter = RateLimiter(max_requests=1, window_ms=3500)
        limiter.admit()

        limiter.wait_if_needed()

        assert clock.sleeps == [1.0, 1.0, 1.0, pytest.approx(0.5)]

    def test_sliding_window_invariant(self, clock):
        """No trailing window ever holds more than max_requests admissions."""
        limiter = RateLimiter(max_requests=3, window_ms=1000)
        admitted = []

        for step in range(40):
            limiter.wait_if_needed()
            admitted.append(clock.now)
            clock.now += 0.125 if step % 3 else 0.0

        window = 1.0
        for t in admitted:
            in_window = [other for other in admitted if t - window < other <= t]
            assert len(in_window) <= 3

    def test_concurrent_admissions_never_overshoot(self):
        limiter = RateLimiter(max_requests=20, window_ms=60_000)
        results = []
        lock = threading.Lock()

        def worker():
            for _ in range(50):
                admitted = limiter.admit()
                with lock:
                    results.append(admitted)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 20
        assert len(results) == 400

    @pytest.mark.parametrize("max_requests,window_ms", [(0, 1000), (5, 0), (-1, 1000)])
    def test_rejects_invalid_limits(self, max_requests, window_ms):
        with pytest.raises(ValueError):
            RateLimiter(max_requests=max_requests, window_ms=window_ms)
