"""
Projection Engine — Economic Indicator Accessor
─────────────────────────────────────────────────
Builds an EconomicIndicatorSet for a country from two kinds of entries:
  - curated constants from reference data (Fed funds, unemployment, GDP)
  - live-derived entries computed from quotes:
      treasury_10y         long-term yield
      yield_curve_spread   long-term minus short-term yield

A derived entry is omitted, never fabricated, when a constituent quote is
unavailable. Sets are cached only when every derived entry came from
fresh quotes, so a partial set is retried on the next call.
"""

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Optional

import httpx

from projection_engine.accessors.inflation import normalise_country
from projection_engine.accessors.quotes import QuoteAccessor
from projection_engine.cache.tiered_cache import TieredCache
from projection_engine.cache.ttl_config import TtlPolicy
from projection_engine.models.market import (
    CACHED, LIVE, STALE, EconomicIndicator, EconomicIndicatorSet, Quote,
)
from projection_engine.reference_data import CURATED_INDICATORS, YIELD_CURVE_SYMBOLS

log = logging.getLogger("pe.accessors.indicators")

FRESH = (LIVE, CACHED)


def _iso_date(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).date().isoformat()


def curated_indicators(country: str) -> Dict[str, EconomicIndicator]:
    return {
        key: EconomicIndicator(name=name, value=value, unit=unit,
                               country=country, last_updated=updated)
        for key, (name, value, unit, updated) in CURATED_INDICATORS.get(country, {}).items()
    }


class IndicatorAccessor:

    category = "indicators"

    def __init__(self, cache: TieredCache, quotes: QuoteAccessor,
                 ttl_policy: Optional[TtlPolicy] = None):
        self.cache  = cache
        self.quotes = quotes
        self.ttl    = (ttl_policy or TtlPolicy()).for_category(self.category)

    async def get(self, client: httpx.AsyncClient, country_code: str) -> EconomicIndicatorSet:
        country = normalise_country(country_code)
        ck = f"{self.category}:{country}"

        cached = self.cache.get(ck, self.ttl)
        if cached is not None:
            return _relabel_set(cached, CACHED)

        indicators = curated_indicators(country)
        complete = True

        symbols = YIELD_CURVE_SYMBOLS.get(country)
        if symbols:
            derived, complete = await self._derive_yields(client, country, *symbols)
            indicators.update(derived)

        result = EconomicIndicatorSet(country=country, indicators=indicators)
        if complete:
            self.cache.put(ck, result)
        else:
            log.info(f"Indicator set for {country} incomplete, not cached")
        return result

    async def _derive_yields(self, client: httpx.AsyncClient, country: str,
                             long_symbol: str, short_symbol: str):
        raw = await asyncio.gather(
            self.quotes.get(client, long_symbol),
            self.quotes.get(client, short_symbol),
            return_exceptions=True,
        )
        long_q, short_q = [r if isinstance(r, Quote) else None for r in raw]
        for symbol, r in zip((long_symbol, short_symbol), raw):
            if isinstance(r, BaseException):
                log.warning(f"Yield quote {symbol} failed: {r}")

        derived: Dict[str, EconomicIndicator] = {}
        if long_q:
            derived["treasury_10y"] = EconomicIndicator(
                name="10-Year Treasury Yield",
                value=round(long_q.price, 3),
                unit="%",
                country=country,
                last_updated=_iso_date(long_q.fetched_at),
                source="derived",
                status=LIVE if long_q.status in FRESH else STALE,
            )
        if long_q and short_q:
            fresh = long_q.status in FRESH and short_q.status in FRESH
            derived["yield_curve_spread"] = EconomicIndicator(
                name="Yield Curve Spread (10Y-3M)",
                value=round(long_q.price - short_q.price, 3),
                unit="pp",
                country=country,
                last_updated=_iso_date(min(long_q.fetched_at, short_q.fetched_at)),
                source="derived",
                status=LIVE if fresh else STALE,
            )
        else:
            log.info(f"Yield curve spread for {country} omitted, constituent unavailable")

        complete = bool(long_q and short_q
                        and long_q.status in FRESH and short_q.status in FRESH)
        return derived, complete


def _relabel_set(s: EconomicIndicatorSet, status: str) -> EconomicIndicatorSet:
    return EconomicIndicatorSet(
        country=s.country,
        indicators={k: replace(v, status=status) for k, v in s.indicators.items()},
    )
