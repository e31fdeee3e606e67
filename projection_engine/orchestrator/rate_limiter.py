"""
Projection Engine — Rate Limiter
─────────────────────────────────
Token-bucket rate limiter per upstream provider.
Keeps concurrent fan-outs from tripping free-tier throttling.

Every provider bucket has capacity 1, which turns the bucket into a
minimum spacing between requests:
  Yahoo Finance:     unofficial, soft limits → 1 req per 0.25s
  exchangerate-api:  free tier              → 1 req per 1s
  World Bank:        generous               → 1 req per 0.5s
  alternative.me:    single endpoint        → 1 req per 1s

Buckets are shared process-wide per provider. Accessors may be handed their
own bucket instead (tests, per-tenant isolation).
"""

import asyncio
import logging
import time
from typing import Callable, Dict, Tuple

log = logging.getLogger("pe.rate_limiter")


class TokenBucket:
    """Token bucket: refills at `rate` tokens/second up to `capacity`."""

    def __init__(self, capacity: float, rate: float,
                 clock: Callable[[], float] = time.monotonic):
        if capacity <= 0 or rate <= 0:
            raise ValueError("capacity and rate must be positive")
        self.capacity = capacity
        self.rate     = rate       # tokens per second
        self._clock   = clock
        self._tokens  = capacity
        self._last    = clock()

    def reserve(self, tokens: float = 1.0) -> float:
        """
        Reserve tokens. Returns the wait in seconds before the caller may
        proceed (0 if immediate). The balance may go negative, so callers
        that reserve back to back queue up instead of all waking together.
        No await in here; callers on one event loop cannot interleave.
        """
        now = self._clock()
        elapsed = now - self._last
        self._tokens = min(self.capacity, self._tokens + elapsed * self.rate)
        self._last   = now

        self._tokens -= tokens
        if self._tokens >= 0:
            return 0.0
        return -self._tokens / self.rate

    async def wait(self, tokens: float = 1.0) -> float:
        """Reserve and sleep if needed. Returns the time slept."""
        wait = self.reserve(tokens)
        if wait > 0:
            log.debug(f"Rate limit: sleeping {wait:.2f}s")
            await asyncio.sleep(wait)
        return wait


# ── Provider configurations ───────────────────────────────────
# (capacity, rate_per_second)

_PROVIDER_CONFIG: Dict[str, Tuple[float, float]] = {
    "yahoo":          (1, 4.0),
    "exchangerate":   (1, 1.0),
    "worldbank":      (1, 2.0),
    "alternative_me": (1, 1.0),
}

_DEFAULT_CONFIG = (1, 1.0)

# Process-wide buckets
_buckets: Dict[str, TokenBucket] = {}


def get_bucket(provider: str) -> TokenBucket:
    if provider not in _buckets:
        cap, rate = _PROVIDER_CONFIG.get(provider, _DEFAULT_CONFIG)
        _buckets[provider] = TokenBucket(cap, rate)
    return _buckets[provider]
