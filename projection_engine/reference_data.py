"""
Projection Engine — Reference Data
────────────────────────────────────
Every static figure the engine relies on, in one place:
  - fallback inflation rates per country
  - curated macro indicators (refreshed by hand, out of band)
  - neutral sentiment fallback and sentiment buckets
  - investment scenario definitions (rates + vehicle suggestions)
  - personal-finance benchmark tables
  - identifier mappings (exchange prefixes, country aliases)

Accessors read from here instead of carrying their own literals.
"""

import copy
from typing import Dict, List, Tuple

# ── Identifier mappings ───────────────────────────────────────

# "LON:VOD" → "VOD.L"
EXCHANGE_PREFIX_SUFFIX: Dict[str, str] = {
    "LON:": ".L",
    "EPA:": ".PA",
    "ETR:": ".DE",
    "AMS:": ".AS",
    "TSX:": ".TO",
    "ASX:": ".AX",
}

# Common codes the World Bank does not use
WORLDBANK_COUNTRY_ALIASES: Dict[str, str] = {
    "UK": "GB",
    "EU": "EMU",
}

# ── Inflation fallback (annual %, reporting year 2024) ────────

FALLBACK_INFLATION_YEAR = 2024
DEFAULT_INFLATION_RATE  = 3.0

FALLBACK_INFLATION: Dict[str, float] = {
    "US":  3.4,
    "GB":  4.0,
    "UK":  4.0,
    "EU":  2.8,
    "EMU": 2.8,
    "CA":  3.1,
    "AU":  4.1,
    "JP":  3.2,
    "CN":  0.2,
    "IN":  5.4,
    "BR":  4.5,
    "MX":  4.8,
    "TH":  1.0,
    "ID":  2.5,
    "PH":  3.2,
    "VN":  3.7,
    "MY":  2.0,
    "TR":  64.8,   # high inflation
    "AR":  211.4,  # hyperinflation
}


def fallback_inflation_rate(country: str) -> float:
    return FALLBACK_INFLATION.get(country.upper(), DEFAULT_INFLATION_RATE)


# ── Curated indicators ────────────────────────────────────────
# key → (name, value, unit, last_updated)

CURATED_INDICATORS: Dict[str, Dict[str, Tuple[str, float, str, str]]] = {
    "US": {
        "federal_funds_rate": ("Federal Funds Rate",  5.33, "%", "2024-12-18"),
        "unemployment_rate":  ("Unemployment Rate",   4.2,  "%", "2024-12-01"),
        "gdp_growth":         ("GDP Growth (Annual)", 2.8,  "%", "2024-12-01"),
    },
}

# Live-derived indicators: Yahoo yield symbols per country
# (long-term, short-term); values are yields in percent.
YIELD_CURVE_SYMBOLS: Dict[str, Tuple[str, str]] = {
    "US": ("^TNX", "^IRX"),   # 10-year note, 13-week bill
}

# ── Sentiment ─────────────────────────────────────────────────

NEUTRAL_SENTIMENT_VALUE = 50

# Upper bounds, checked in order; anything above the last is Extreme Greed
SENTIMENT_BUCKETS: List[Tuple[int, str]] = [
    (24, "Extreme Fear"),
    (44, "Fear"),
    (55, "Neutral"),
    (74, "Greed"),
]
SENTIMENT_TOP_BUCKET = "Extreme Greed"


def classify_sentiment(value: int) -> str:
    for upper, label in SENTIMENT_BUCKETS:
        if value <= upper:
            return label
    return SENTIMENT_TOP_BUCKET


# ── Investment scenarios ──────────────────────────────────────

INVESTMENT_SCENARIOS: Dict[str, dict] = {
    "conservative": {
        "name":          "Conservative Plan",
        "risk_level":    "Low",
        "annual_return": 0.045,
        "description":   "High-yield savings accounts, CDs, bonds",
        "recommendations": (
            "High-yield savings account (~4.5% APY)",
            "Treasury bonds",
            "Certificate of Deposit (CD)",
        ),
    },
    "balanced": {
        "name":          "Balanced Plan",
        "risk_level":    "Medium",
        "annual_return": 0.075,
        "description":   "Index funds, diversified ETFs, balanced portfolio",
        "recommendations": (
            "S&P 500 index fund (e.g. VOO)",
            "Total stock market fund (e.g. VTI)",
            "Target-date funds",
        ),
    },
    "aggressive": {
        "name":          "Aggressive Plan",
        "risk_level":    "High",
        "annual_return": 0.11,
        "description":   "Growth stocks, tech sector, higher risk higher reward",
        "recommendations": (
            "QQQ (tech-heavy)",
            "Individual growth stocks",
            "Emerging markets ETF",
        ),
    },
}

# Rate used by the realistic-timeline solver
TIMELINE_ANNUAL_RETURN = INVESTMENT_SCENARIOS["balanced"]["annual_return"]

# ── Personal-finance benchmarks ───────────────────────────────

_FINANCIAL_BENCHMARKS: Dict[str, dict] = {
    # Recommended share of gross income saved, by age band
    "savings_rate_by_age": {
        "20-29": {"minimum": 0.10, "target": 0.15},
        "30-39": {"minimum": 0.15, "target": 0.20},
        "40-49": {"minimum": 0.15, "target": 0.25},
        "50-59": {"minimum": 0.20, "target": 0.30},
        "60+":   {"minimum": 0.20, "target": 0.30},
    },
    # Months of expenses to hold in cash, by income stability
    "emergency_fund_months_by_income": {
        "stable_dual_income":   {"minimum": 3, "recommended": 4},
        "stable_single_income": {"minimum": 4, "recommended": 6},
        "variable_income":      {"minimum": 6, "recommended": 9},
        "self_employed":        {"minimum": 6, "recommended": 12},
    },
    # Total monthly debt payments / gross monthly income
    "debt_to_income_thresholds": {
        "healthy":   0.20,
        "manageable": 0.36,
        "high":      0.43,
        "critical":  0.50,
    },
    # Retirement savings as a multiple of annual salary
    "retirement_multiple_by_age": {
        30: 1,
        35: 2,
        40: 3,
        45: 4,
        50: 6,
        55: 7,
        60: 8,
        67: 10,
    },
    # Suggested share of take-home pay per spending category
    "expense_ratio_by_category": {
        "housing":        0.30,
        "transportation": 0.10,
        "food":           0.12,
        "utilities":      0.06,
        "insurance":      0.07,
        "healthcare":     0.05,
        "debt_payments":  0.10,
        "savings":        0.20,
    },
}


def financial_benchmarks() -> Dict[str, dict]:
    """Deep copy of the benchmark tables; callers may mutate it freely."""
    return copy.deepcopy(_FINANCIAL_BENCHMARKS)
