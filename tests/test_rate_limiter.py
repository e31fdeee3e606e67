import asyncio
from unittest.mock import AsyncMock

import pytest

from projection_engine.orchestrator import rate_limiter
from projection_engine.orchestrator.rate_limiter import TokenBucket, get_bucket

from conftest import FakeClock, run


class TestTokenBucket:
    def test_first_request_is_immediate(self):
        bucket = TokenBucket(1, 4.0, clock=FakeClock())
        assert bucket.reserve() == 0.0

    def test_back_to_back_requests_are_spaced(self):
        bucket = TokenBucket(1, 4.0, clock=FakeClock())
        waits = [bucket.reserve() for _ in range(3)]
        assert waits == pytest.approx([0.0, 0.25, 0.5])

    def test_refills_over_time(self):
        clock = FakeClock()
        bucket = TokenBucket(1, 1.0, clock=clock)
        bucket.reserve()
        clock.advance(1.0)
        assert bucket.reserve() == 0.0

    def test_refill_capped_at_capacity(self):
        clock = FakeClock()
        bucket = TokenBucket(2, 1.0, clock=clock)
        clock.advance(100)
        assert bucket.reserve() == 0.0
        assert bucket.reserve() == 0.0
        assert bucket.reserve() == pytest.approx(1.0)

    def test_rejects_bad_config(self):
        with pytest.raises(ValueError):
            TokenBucket(0, 1.0)
        with pytest.raises(ValueError):
            TokenBucket(1, 0)

    def test_wait_sleeps_for_reserved_time(self, monkeypatch):
        sleep = AsyncMock()
        monkeypatch.setattr(asyncio, "sleep", sleep)
        bucket = TokenBucket(1, 2.0, clock=FakeClock())
        assert run(bucket.wait()) == 0.0
        assert run(bucket.wait()) == pytest.approx(0.5)
        sleep.assert_awaited_once()


class TestProviderRegistry:
    def test_bucket_shared_per_provider(self):
        assert get_bucket("yahoo") is get_bucket("yahoo")
        assert get_bucket("yahoo") is not get_bucket("worldbank")

    def test_every_provider_enforces_spacing(self):
        for cap, rate in rate_limiter._PROVIDER_CONFIG.values():
            assert cap == 1
            assert rate > 0

    def test_unknown_provider_gets_default(self):
        bucket = get_bucket("some_new_provider")
        assert (bucket.capacity, bucket.rate) == rate_limiter._DEFAULT_CONFIG
