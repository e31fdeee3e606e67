from .market import (
    CACHED, FALLBACK, LIVE, STALE,
    EconomicIndicator, EconomicIndicatorSet, ForexRate, InflationRecord,
    MarketContext, Quote, SentimentIndex,
)
from .plans import InvestmentPlan, InvestmentPlanSet, RealisticTimelineResult

__all__ = [
    "CACHED", "FALLBACK", "LIVE", "STALE",
    "EconomicIndicator", "EconomicIndicatorSet", "ForexRate", "InflationRecord",
    "MarketContext", "Quote", "SentimentIndex",
    "InvestmentPlan", "InvestmentPlanSet", "RealisticTimelineResult",
]
