"""
Projection Engine — Market Data Aggregator
────────────────────────────────────────────
Fans out to the accessors concurrently and merges their answers into one
MarketContext. Every branch is settled on its own: a failing branch is
logged, recorded in MarketContext.errors and leaves its field as None.
The aggregate itself never fails.

Also renders the context as a plain-text narrative for a downstream
language model. Sections come out in a fixed order and only when their
data resolved:

  1. STOCK MARKET SENTIMENT
  2. CRYPTO SENTIMENT
  3. MACRO INDICATORS
  4. FINANCIAL PLANNING GUIDANCE

Usage:
    aggregator = MarketDataAggregator(service)
    ctx  = await aggregator.get_market_context("US")
    text = await aggregator.get_market_narrative("US")
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from projection_engine.models.market import (
    FALLBACK, STALE, EconomicIndicatorSet, InflationRecord, MarketContext, SentimentIndex,
)
from projection_engine.reference_data import TIMELINE_ANNUAL_RETURN

log = logging.getLogger("pe.aggregator")

UNAVAILABLE_NARRATIVE = "Market data temporarily unavailable - using historical averages."

# ── Narrative thresholds ──────────────────────────────────────
STOCK_BULLISH_PCT   = 1.0     # SPY daily change above → bullish
STOCK_BEARISH_PCT   = -1.0    # below → bearish
INFLATION_HIGH      = 4.0     # % annual
INFLATION_MODERATE  = 2.0
FED_RATE_HIGH       = 5.0     # %
YIELD_CURVE_FLAT    = 0.5     # pp; below 0 is inverted

LEAD_BENCHMARK = "SPY"
BENCHMARK_NAMES = {
    "SPY": "S&P 500",
    "QQQ": "NASDAQ 100",
    "DIA": "Dow Jones",
}


class MarketDataAggregator:

    def __init__(self, service):
        self.service = service

    async def get_market_context(self, country_code: str = "US") -> MarketContext:
        country = (country_code or "US").upper().strip()
        branches = {
            "benchmarks": self.service.get_multiple_stocks(self.service.benchmark_symbols),
            "inflation":  self.service.get_inflation_rate(country),
            "indicators": self.service.get_economic_indicators(country),
            "sentiment":  self.service.get_crypto_sentiment_index(),
        }
        raw = await asyncio.gather(*branches.values(), return_exceptions=True)

        values: Dict[str, Any] = {}
        errors: Dict[str, str] = {}
        for name, result in zip(branches.keys(), raw):
            if isinstance(result, BaseException):
                log.error(f"Market context branch '{name}' failed for {country}: {result}")
                errors[name] = str(result) or type(result).__name__
                values[name] = None
            else:
                values[name] = result

        if not values["benchmarks"]:
            errors.setdefault("benchmarks", "no benchmark quotes available")
            values["benchmarks"] = None

        return MarketContext(country=country, errors=errors, **values)

    async def get_market_narrative(self, country_code: str = "US") -> str:
        ctx = await self.get_market_context(country_code)
        return render_narrative(ctx)


# ══════════════════════════════════════════════════════════════
# NARRATIVE RENDERING
# ══════════════════════════════════════════════════════════════

def stock_mood(change_percent: float) -> str:
    if change_percent > STOCK_BULLISH_PCT:
        return "bullish"
    if change_percent < STOCK_BEARISH_PCT:
        return "bearish"
    return "neutral"


def inflation_label(rate: float) -> str:
    if rate > INFLATION_HIGH:
        return "HIGH inflation"
    if rate > INFLATION_MODERATE:
        return "MODERATE inflation"
    return "LOW inflation"


def yield_curve_label(spread: float) -> str:
    if spread < 0:
        return "INVERTED yield curve"
    if spread < YIELD_CURVE_FLAT:
        return "FLAT yield curve"
    return "NORMAL yield curve"


def _signed(value: float) -> str:
    return f"{'+' if value > 0 else ''}{value:.2f}"


def _freshness_note(status: str) -> str:
    if status == STALE:
        return " (last known value)"
    if status == FALLBACK:
        return " (historical average)"
    return ""


def _stock_section(benchmarks) -> Optional[List[str]]:
    if not benchmarks:
        return None
    lines = ["STOCK MARKET SENTIMENT:"]
    lead = benchmarks.get(LEAD_BENCHMARK)
    ordered = ([lead] if lead else []) + [q for s, q in benchmarks.items() if s != LEAD_BENCHMARK]
    for q in ordered:
        name = BENCHMARK_NAMES.get(q.symbol, q.symbol)
        lines.append(f"• {name} ({q.symbol}): ${q.price:.2f} "
                     f"({_signed(q.change_percent)}% today){_freshness_note(q.status)}")
    mood_source = lead or ordered[0]
    lines.append(f"• Market Sentiment: {stock_mood(mood_source.change_percent)}")
    return lines


def _crypto_section(sentiment: Optional[SentimentIndex]) -> Optional[List[str]]:
    if sentiment is None:
        return None
    if sentiment.status == FALLBACK:
        reading = f"{sentiment.value}/100 ({sentiment.classification}, default - live index unavailable)"
    else:
        reading = f"{sentiment.value}/100 ({sentiment.classification}){_freshness_note(sentiment.status)}"
    lines = ["CRYPTO SENTIMENT:", f"• Fear & Greed Index: {reading}"]
    if sentiment.classification == "Extreme Fear":
        lines.append("  → Fearful markets have historically rewarded patient, dollar-cost-averaged buying")
    elif sentiment.classification == "Extreme Greed":
        lines.append("  → Euphoric markets carry elevated correction risk; avoid chasing rallies")
    return lines


def _macro_section(inflation: Optional[InflationRecord],
                   indicators: Optional[EconomicIndicatorSet]) -> Optional[List[str]]:
    lines = ["MACRO INDICATORS:"]
    if inflation is not None:
        lines.append(f"• Inflation ({inflation.country}): {inflation.rate:.1f}% annually "
                     f"[{inflation.year}]{_freshness_note(inflation.status)}")
        status = inflation_label(inflation.rate)
        if inflation.rate > INFLATION_HIGH:
            status += " - consider I-Bonds, TIPS"
        lines.append(f"  → Status: {status}")

    if indicators is not None:
        fed = indicators.get("federal_funds_rate")
        if fed:
            lines.append(f"• Fed Funds Rate: {fed.value:.2f}%")
            if fed.value > FED_RATE_HIGH:
                lines.append("  → High rates favor savings accounts & bonds")
            else:
                lines.append("  → Lower rates favor stocks & real estate")
        unemployment = indicators.get("unemployment_rate")
        if unemployment:
            lines.append(f"• Unemployment: {unemployment.value:.1f}%")
        gdp = indicators.get("gdp_growth")
        if gdp:
            lines.append(f"• GDP Growth: {gdp.value:.1f}%")
        spread = indicators.get("yield_curve_spread")
        if spread:
            lines.append(f"• Yield Curve (10Y-3M): {_signed(spread.value)} pp "
                         f"- {yield_curve_label(spread.value)}{_freshness_note(spread.status)}")
            if spread.value < 0:
                lines.append("  → Historically a recession warning")

    return lines if len(lines) > 1 else None


def _planning_section(ctx: MarketContext) -> Optional[List[str]]:
    inflation  = ctx.inflation
    indicators = ctx.indicators
    if inflation is None and not indicators:
        return None

    lines = ["FINANCIAL PLANNING GUIDANCE:"]
    if inflation is not None:
        real_return = TIMELINE_ANNUAL_RETURN * 100 - inflation.rate
        lines.append(f"• Balanced portfolio ({TIMELINE_ANNUAL_RETURN * 100:.1f}% nominal) "
                     f"≈ {real_return:.1f}% real return after inflation")
        if inflation.rate > INFLATION_HIGH:
            lines.append("• Cash loses purchasing power quickly - keep only the emergency fund liquid")
        elif inflation.rate <= INFLATION_MODERATE:
            lines.append("• Low inflation - long-term investing compounds close to nominal returns")

    if indicators:
        fed = indicators.get("federal_funds_rate")
        if fed and fed.value > FED_RATE_HIGH:
            lines.append("• High-yield savings and short-term treasuries pay well - park goal money due within 2 years there")
        spread = indicators.get("yield_curve_spread")
        if spread and spread.value < 0:
            lines.append("• Inverted curve - build a 6-month emergency fund before increasing risk")

    return lines if len(lines) > 1 else None


def render_narrative(ctx: MarketContext) -> str:
    sections = [
        _stock_section(ctx.benchmarks),
        _crypto_section(ctx.sentiment),
        _macro_section(ctx.inflation, ctx.indicators),
        _planning_section(ctx),
    ]
    blocks = ["\n".join(s) for s in sections if s]
    if not blocks:
        return UNAVAILABLE_NARRATIVE
    return "📊 CURRENT MARKET CONDITIONS\n\n" + "\n\n".join(blocks) + "\n"
