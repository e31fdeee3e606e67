"""
Projection Engine — Market Data Models
────────────────────────────────────────
Normalised records produced by the upstream accessors and the
aggregate snapshot handed to callers.

status on every record is one of:
  live      fetched just now
  cached    served from cache within its TTL
  stale     served from cache past its TTL because the upstream failed
  fallback  static reference value
"""

import time
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional

LIVE     = "live"
CACHED   = "cached"
STALE    = "stale"
FALLBACK = "fallback"


@dataclass(frozen=True)
class Quote:
    symbol:         str
    price:          float
    change:         float
    change_percent: float
    volume:         Optional[int] = None
    market_cap:     Optional[float] = None
    currency:       str = "USD"
    fetched_at:     float = field(default_factory=time.time)
    status:         str = LIVE

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ForexRate:
    from_currency: str
    to_currency:   str
    rate:          float
    last_updated:  Optional[float] = None   # upstream timestamp (epoch seconds)
    status:        str = LIVE

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class InflationRecord:
    country: str
    rate:    float          # annual %
    year:    int
    period:  str = "Annual"
    status:  str = LIVE

    @property
    def is_fallback(self) -> bool:
        return self.status == FALLBACK

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class EconomicIndicator:
    name:         str
    value:        float
    unit:         str
    country:      str
    last_updated: str               # ISO date
    source:       str = "curated"   # "curated" | "derived"
    status:       str = LIVE

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class EconomicIndicatorSet:
    country:    str
    indicators: Dict[str, EconomicIndicator] = field(default_factory=dict)

    def get(self, key: str) -> Optional[EconomicIndicator]:
        return self.indicators.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self.indicators

    def __len__(self) -> int:
        return len(self.indicators)

    def to_dict(self) -> dict:
        return {
            "country":    self.country,
            "indicators": {k: v.to_dict() for k, v in self.indicators.items()},
        }


@dataclass(frozen=True)
class SentimentIndex:
    value:          int             # 0-100
    classification: str
    timestamp:      Optional[float] = None
    status:         str = LIVE

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class MarketContext:
    """
    Aggregate snapshot. Every data field is optional because any upstream
    may fail independently; errors records why a field is missing.
    """
    country:      str
    benchmarks:   Optional[Dict[str, Quote]]       = None
    inflation:    Optional[InflationRecord]        = None
    indicators:   Optional[EconomicIndicatorSet]   = None
    sentiment:    Optional[SentimentIndex]         = None
    errors:       Dict[str, str]                   = field(default_factory=dict)
    generated_at: float                            = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "country":      self.country,
            "benchmarks":   {s: q.to_dict() for s, q in self.benchmarks.items()}
                            if self.benchmarks else None,
            "inflation":    self.inflation.to_dict() if self.inflation else None,
            "indicators":   self.indicators.to_dict() if self.indicators else None,
            "sentiment":    self.sentiment.to_dict() if self.sentiment else None,
            "errors":       self.errors,
            "generated_at": int(self.generated_at),
        }
