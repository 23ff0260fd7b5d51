from unittest.mock import patch

import pytest

from app import rate_limiter

START = 1_900_000_000


@pytest.fixture(autouse=True)
def memory_only(monkeypatch):
    monkeypatch.setattr(rate_limiter, "memory_counters", {})
    monkeypatch.setattr(rate_limiter, "last_cleanup_time", START)
    monkeypatch.setattr(rate_limiter, "get_redis_client", lambda: None)


def hit_at(timestamp, key, limit=5, window_seconds=1):
    with patch.object(rate_limiter.time, "time", return_value=timestamp):
        return rate_limiter.check_rate_limit(key, limit, window_seconds)


def test_limit_is_enforced_within_window():
    results = [hit_at(START, "login:10.0.0.1", limit=2, window_seconds=300)[0] for _ in range(3)]
    assert results == [True, True, False]

    allowed, count, _ = hit_at(START + 301, "login:10.0.0.1", limit=2, window_seconds=300)
    assert allowed is True
    assert count == 1


def test_expired_counters_are_evicted():
    for i in range(1000):
        hit_at(START, f"login:10.0.{i // 250}.{i % 250}")
    assert len(rate_limiter.memory_counters) == 1000

    hit_at(START + 3600, "login:192.168.1.1")
    assert list(rate_limiter.memory_counters) == ["login:192.168.1.1"]


def test_eviction_runs_at_most_once_per_interval():
    hit_at(START, "login:10.0.0.1")
    hit_at(START + 5, "login:10.0.0.2")
    # First window ended but the cleanup interval has not passed yet
    assert "login:10.0.0.1" in rate_limiter.memory_counters

    hit_at(START + rate_limiter.COUNTER_CLEANUP_INTERVAL, "login:10.0.0.3")
    assert set(rate_limiter.memory_counters) == {"login:10.0.0.3"}
