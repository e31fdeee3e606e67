from projection_engine.cache.tiered_cache import TieredCache
from projection_engine.cache.ttl_config import TTL, TtlPolicy

import pytest

from conftest import FakeClock


class TestTieredCache:
    def setup_method(self):
        self.clock = FakeClock()
        self.cache = TieredCache(clock=self.clock)

    def test_missing_key(self):
        assert self.cache.get("quote:SPY", 3600) is None
        assert self.cache.get_stale_or_absent("quote:SPY") is None
        assert self.cache.age("quote:SPY") is None

    def test_fresh_hit(self):
        self.cache.put("quote:SPY", "v1")
        self.clock.advance(3599)
        assert self.cache.get("quote:SPY", 3600) == "v1"

    def test_expired_entry_not_served_by_get(self):
        self.cache.put("quote:SPY", "v1")
        self.clock.advance(3601)
        assert self.cache.get("quote:SPY", 3600) is None

    def test_expired_entry_still_available_as_stale(self):
        self.cache.put("quote:SPY", "v1")
        self.clock.advance(10 * 3600)
        assert self.cache.get_stale_or_absent("quote:SPY") == "v1"
        assert "quote:SPY" in self.cache

    def test_put_refreshes_timestamp(self):
        self.cache.put("k", "old")
        self.clock.advance(5000)
        self.cache.put("k", "new")
        assert self.cache.age("k") == 0
        assert self.cache.get("k", 10) == "new"

    def test_ttl_is_decided_by_caller(self):
        self.cache.put("k", "v")
        self.clock.advance(2 * 3600)
        assert self.cache.get("k", TTL["quote"]) is None
        assert self.cache.get("k", TTL["inflation"]) == "v"

    def test_len_and_clear(self):
        self.cache.put("a", 1)
        self.cache.put("b", 2)
        assert len(self.cache) == 2
        self.cache.clear()
        assert len(self.cache) == 0


class TestTtlPolicy:
    def test_defaults(self):
        policy = TtlPolicy()
        assert policy.for_category("quote") == 3600
        assert policy.for_category("forex") == 3600
        assert policy.for_category("inflation") == 86400
        assert policy.for_category("indicators") == 86400
        assert policy.for_category("sentiment") == 14400

    def test_unknown_category(self):
        with pytest.raises(KeyError):
            TtlPolicy().for_category("weather")
