"""
Projection Engine — Upstream Accessor Base
────────────────────────────────────────────
All upstream accessors inherit from UpstreamAccessor.

Subclasses implement:
  - category:   cache/TTL category ("quote", "forex", ...)
  - provider:   rate-limiter bucket name
  - normalize(key) -> canonical key, raises InvalidIdentifier
  - _fetch(client, key) -> record, or None when the payload is unusable
  - _fallback(key) -> static record or None (optional)

get() runs the shared state machine:

  CacheHit ─────────────────────────────────────────► cached value
  CacheMiss ─► request ─► Success ──────────────────► store, live value
                        ├► Success-but-unusable ────► static fallback
                        └► Network/HTTP error ──────► stale cache
                                                       └► static fallback
                                                           └► None

A 429 also opens a back-off window one TTL long for that key; inside it
the network is skipped entirely.
"""

import dataclasses
import logging
from abc import ABC, abstractmethod
from typing import Dict, Generic, Optional, TypeVar

import httpx

from projection_engine.cache.tiered_cache import TieredCache
from projection_engine.cache.ttl_config import TtlPolicy
from projection_engine.errors import RateLimited, UpstreamUnavailable
from projection_engine.models.market import CACHED, FALLBACK, STALE
from projection_engine.orchestrator.rate_limiter import TokenBucket, get_bucket

log = logging.getLogger("pe.accessors")

T = TypeVar("T")


class UpstreamAccessor(ABC, Generic[T]):

    category: str = ""
    provider: str = ""

    def __init__(self, cache: TieredCache, ttl_policy: Optional[TtlPolicy] = None,
                 limiter: Optional[TokenBucket] = None,
                 timeout: float = 10.0):
        self.cache   = cache
        self.ttl     = (ttl_policy or TtlPolicy()).for_category(self.category)
        self.limiter = limiter or get_bucket(self.provider)
        self.timeout = timeout
        self._backoff_until: Dict[str, float] = {}

    # ── Subclass hooks ────────────────────────────────────────

    @abstractmethod
    def normalize(self, key: str) -> str: ...

    @abstractmethod
    async def _fetch(self, client: httpx.AsyncClient, key: str) -> Optional[T]: ...

    def _fallback(self, key: str) -> Optional[T]:
        return None

    # ── State machine ─────────────────────────────────────────

    def cache_key(self, key: str) -> str:
        return f"{self.category}:{key}"

    async def get(self, client: httpx.AsyncClient, key: str) -> Optional[T]:
        """Public entry point. Never raises for upstream trouble."""
        key = self.normalize(key)
        ck  = self.cache_key(key)

        cached = self.cache.get(ck, self.ttl)
        if cached is not None:
            return _relabel(cached, CACHED)

        if self._in_backoff(key):
            log.info(f"{self.provider}: {key} throttled, skipping network")
            return self._recover(key)

        try:
            await self.limiter.wait()
            value = await self._fetch(client, key)
        except RateLimited as e:
            self._backoff_until[key] = self.cache.clock() + self.ttl
            log.warning(f"{self.provider}: rate limited on {key} "
                        f"(retry_after={e.retry_after}), backing off {self.ttl}s")
            return self._recover(key)
        except UpstreamUnavailable as e:
            log.warning(f"{self.category} fetch failed for {key}: {e}")
            return self._recover(key)

        if value is None:
            log.info(f"{self.provider}: unusable payload for {key}")
            return self._static(key)

        self._backoff_until.pop(key, None)
        self.cache.put(ck, value)
        return value

    def _in_backoff(self, key: str) -> bool:
        until = self._backoff_until.get(key)
        if until is None:
            return False
        if self.cache.clock() >= until:
            del self._backoff_until[key]
            return False
        return True

    def _recover(self, key: str) -> Optional[T]:
        stale = self.cache.get_stale_or_absent(self.cache_key(key))
        if stale is not None:
            log.info(f"{self.category}: serving stale value for {key}")
            return _relabel(stale, STALE)
        return self._static(key)

    def _static(self, key: str) -> Optional[T]:
        value = self._fallback(key)
        if value is not None:
            log.info(f"{self.category}: serving static fallback for {key}")
            return _relabel(value, FALLBACK)
        return None


def _relabel(value, status: str):
    return dataclasses.replace(value, status=status)
