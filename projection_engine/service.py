"""
Projection Engine — Market Data Service
─────────────────────────────────────────
The in-process entry point. One instance owns:
  - a TieredCache (no module-level cache, so instances stay isolated)
  - one accessor per upstream category
  - a shared httpx.AsyncClient, created lazily
  - the aggregator

Usage:
    async with MarketDataService() as svc:
        ctx   = await svc.get_market_context("US")
        plans = svc.build_investment_plans(50_000, 5_000, 4_000, 3_000, 10)
"""

import asyncio
import logging
from typing import Dict, Iterable, Optional

import httpx

from projection_engine import projections
from projection_engine.accessors.forex import ForexAccessor, pair_key
from projection_engine.accessors.indicators import IndicatorAccessor
from projection_engine.accessors.inflation import InflationAccessor
from projection_engine.accessors.quotes import QuoteAccessor
from projection_engine.accessors.sentiment import GLOBAL_KEY, SentimentAccessor
from projection_engine.cache.tiered_cache import TieredCache
from projection_engine.config import Settings
from projection_engine.models.market import (
    EconomicIndicatorSet, ForexRate, InflationRecord, MarketContext, Quote, SentimentIndex,
)
from projection_engine.orchestrator.aggregator import MarketDataAggregator
from projection_engine.orchestrator.rate_limiter import TokenBucket
from projection_engine.reference_data import financial_benchmarks

log = logging.getLogger("pe.service")


class MarketDataService:

    # Pure projection functions, exposed alongside the market accessors
    future_value             = staticmethod(projections.future_value)
    required_monthly_payment = staticmethod(projections.required_monthly_payment)
    build_investment_plans   = staticmethod(projections.build_investment_plans)
    solve_realistic_timeline = staticmethod(projections.solve_realistic_timeline)

    def __init__(self, settings: Optional[Settings] = None,
                 cache: Optional[TieredCache] = None,
                 client: Optional[httpx.AsyncClient] = None,
                 limiters: Optional[Dict[str, TokenBucket]] = None):
        self.settings = settings or Settings()
        self.settings.validate()
        self.cache = cache if cache is not None else TieredCache()
        self._client = client
        self._owns_client = client is None

        limiters = limiters or {}
        policy  = self.settings.ttl_policy()
        timeout = self.settings.request_timeout

        def common(provider: str) -> dict:
            return {"ttl_policy": policy, "limiter": limiters.get(provider), "timeout": timeout}

        self.quotes = QuoteAccessor(self.cache, url=self.settings.yahoo_chart_url,
                                    **common("yahoo"))
        self.forex = ForexAccessor(self.cache, url=self.settings.forex_url,
                                   **common("exchangerate"))
        self.inflation = InflationAccessor(self.cache, url=self.settings.worldbank_url,
                                           **common("worldbank"))
        self.sentiment = SentimentAccessor(self.cache, url=self.settings.sentiment_url,
                                           **common("alternative_me"))
        self.indicators = IndicatorAccessor(self.cache, self.quotes, ttl_policy=policy)
        self.aggregator = MarketDataAggregator(self)

    @property
    def benchmark_symbols(self):
        return list(self.settings.benchmark_symbols)

    # ── HTTP client lifecycle ─────────────────────────────────

    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
                timeout=self.settings.request_timeout,
            )
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "MarketDataService":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    # ── Accessors ─────────────────────────────────────────────

    async def get_stock_quote(self, symbol: str) -> Optional[Quote]:
        return await self.quotes.get(self.client(), symbol)

    async def get_multiple_stocks(self, symbols: Iterable[str]) -> Dict[str, Quote]:
        """Quotes keyed by symbol; symbols that fail are simply missing."""
        symbols = list(dict.fromkeys(symbols))
        raw = await asyncio.gather(
            *[self.get_stock_quote(s) for s in symbols],
            return_exceptions=True,
        )
        results: Dict[str, Quote] = {}
        for symbol, r in zip(symbols, raw):
            if isinstance(r, Quote):
                results[r.symbol] = r
            elif isinstance(r, BaseException):
                log.warning(f"Quote for {symbol} failed: {r}")
        return results

    async def get_forex_rate(self, from_currency: str, to_currency: str) -> Optional[ForexRate]:
        return await self.forex.get(self.client(), pair_key(from_currency, to_currency))

    async def get_inflation_rate(self, country_code: str = "US") -> InflationRecord:
        return await self.inflation.get(self.client(), country_code)

    async def get_economic_indicators(self, country_code: str = "US") -> EconomicIndicatorSet:
        return await self.indicators.get(self.client(), country_code)

    async def get_crypto_sentiment_index(self) -> SentimentIndex:
        return await self.sentiment.get(self.client(), GLOBAL_KEY)

    def get_financial_benchmarks(self) -> Dict[str, dict]:
        return financial_benchmarks()

    # ── Aggregates ────────────────────────────────────────────

    async def get_market_context(self, country_code: str = "US") -> MarketContext:
        return await self.aggregator.get_market_context(country_code)

    async def get_market_narrative(self, country_code: str = "US") -> str:
        return await self.aggregator.get_market_narrative(country_code)

    async def build_market_aware_plans(self, target_amount: float, current_savings: float,
                                       monthly_income: float, monthly_expenses: float,
                                       years: float, country_code: str = "US") -> dict:
        """
        Plans for a target stated in today's money: the target is grown by the
        country's current inflation rate before solving for contributions.
        """
        inflation = await self.get_inflation_rate(country_code)
        adjusted = projections.inflation_adjusted_target(target_amount, inflation.rate, years)
        plans = projections.build_investment_plans(
            adjusted, current_savings, monthly_income, monthly_expenses, years)
        return {
            "target_today":     target_amount,
            "target_adjusted":  adjusted,
            "inflation":        inflation.to_dict(),
            "plans":            plans.to_dict(),
        }
