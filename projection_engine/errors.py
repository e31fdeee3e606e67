"""
Projection Engine — Error Taxonomy
────────────────────────────────────
UpstreamUnavailable and RateLimited never leave an accessor: they are
recovered via stale cache or static fallback. InvalidIdentifier and
ProjectionDomainError propagate to the caller.
"""

from typing import Optional


class MarketDataError(Exception):
    """Base class for market data failures."""


class UpstreamUnavailable(MarketDataError):
    """Network or HTTP failure talking to an upstream provider."""

    def __init__(self, provider: str, reason: str):
        super().__init__(f"{provider}: {reason}")
        self.provider = provider
        self.reason   = reason


class RateLimited(UpstreamUnavailable):
    """Upstream answered HTTP 429."""

    def __init__(self, provider: str, retry_after: Optional[float] = None):
        super().__init__(provider, "rate limited (HTTP 429)")
        self.retry_after = retry_after


class InvalidIdentifier(MarketDataError, ValueError):
    """Symbol, currency or country code that no mapping can serve."""


class ProjectionDomainError(ValueError):
    """Numeric input outside the domain of a projection function."""
