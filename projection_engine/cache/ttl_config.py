"""
Projection Engine — TTL Configuration
──────────────────────────────────────
Single source of truth for cache durations.
Organised by data category, by how fast the real world changes.
"""

from dataclasses import dataclass

# ── Per category TTL (seconds) ────────────────────────────────

TTL = {
    # Fast-changing
    "quote":      3600,           # 1 hour
    "forex":      3600,           # 1 hour
    "sentiment":  4 * 3600,       # 4 hours  (index publishes daily)

    # Slow-changing, reporting cadence is monthly
    "inflation":  24 * 3600,      # 1 day
    "indicators": 24 * 3600,      # 1 day
}


@dataclass(frozen=True)
class TtlPolicy:
    """TTL per category, injected into each accessor."""

    quote:      int = TTL["quote"]
    forex:      int = TTL["forex"]
    sentiment:  int = TTL["sentiment"]
    inflation:  int = TTL["inflation"]
    indicators: int = TTL["indicators"]

    def for_category(self, category: str) -> int:
        try:
            return getattr(self, category)
        except AttributeError:
            raise KeyError(f"No TTL configured for category '{category}'") from None
