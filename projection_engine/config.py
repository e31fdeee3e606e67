"""
Projection Engine — Settings
─────────────────────────────
Every field defaults from an environment variable; a local .env file is
loaded on import.

  PE_REQUEST_TIMEOUT     seconds per upstream request (default 10)
  PE_QUOTE_TTL           quote cache TTL in seconds
  PE_FOREX_TTL           forex cache TTL in seconds
  PE_INFLATION_TTL       inflation cache TTL in seconds
  PE_INDICATOR_TTL       indicator-set cache TTL in seconds
  PE_SENTIMENT_TTL       sentiment cache TTL in seconds
  PE_BENCHMARK_SYMBOLS   comma-separated benchmark tickers (default SPY,QQQ,DIA)
  PE_YAHOO_CHART_URL     override upstream URLs (testing / proxies)
  PE_FOREX_URL
  PE_WORLDBANK_URL
  PE_SENTIMENT_URL
"""

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

from projection_engine.accessors.forex import FOREX_URL
from projection_engine.accessors.inflation import WORLDBANK_URL
from projection_engine.accessors.quotes import YAHOO_CHART_URL
from projection_engine.accessors.sentiment import SENTIMENT_URL
from projection_engine.cache.ttl_config import TTL, TtlPolicy

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from None


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got '{raw}'") from None


def _env_list(name: str, default: str) -> List[str]:
    raw = os.environ.get(name, default)
    return [s.strip().upper() for s in raw.split(",") if s.strip()]


@dataclass
class Settings:
    request_timeout: float = field(default_factory=lambda: _env_float("PE_REQUEST_TIMEOUT", 10.0))

    quote_ttl:      int = field(default_factory=lambda: _env_int("PE_QUOTE_TTL", TTL["quote"]))
    forex_ttl:      int = field(default_factory=lambda: _env_int("PE_FOREX_TTL", TTL["forex"]))
    inflation_ttl:  int = field(default_factory=lambda: _env_int("PE_INFLATION_TTL", TTL["inflation"]))
    indicator_ttl:  int = field(default_factory=lambda: _env_int("PE_INDICATOR_TTL", TTL["indicators"]))
    sentiment_ttl:  int = field(default_factory=lambda: _env_int("PE_SENTIMENT_TTL", TTL["sentiment"]))

    benchmark_symbols: List[str] = field(
        default_factory=lambda: _env_list("PE_BENCHMARK_SYMBOLS", "SPY,QQQ,DIA")
    )

    yahoo_chart_url: str = field(default_factory=lambda: os.environ.get(
        "PE_YAHOO_CHART_URL", YAHOO_CHART_URL))
    forex_url: str = field(default_factory=lambda: os.environ.get(
        "PE_FOREX_URL", FOREX_URL))
    worldbank_url: str = field(default_factory=lambda: os.environ.get(
        "PE_WORLDBANK_URL", WORLDBANK_URL))
    sentiment_url: str = field(default_factory=lambda: os.environ.get(
        "PE_SENTIMENT_URL", SENTIMENT_URL))

    def ttl_policy(self) -> TtlPolicy:
        return TtlPolicy(
            quote=self.quote_ttl,
            forex=self.forex_ttl,
            sentiment=self.sentiment_ttl,
            inflation=self.inflation_ttl,
            indicators=self.indicator_ttl,
        )

    def validate(self) -> None:
        """Reject settings no accessor can run with."""
        if self.request_timeout <= 0:
            raise ValueError("PE_REQUEST_TIMEOUT must be positive")
        for name in ("quote_ttl", "forex_ttl", "inflation_ttl", "indicator_ttl", "sentiment_ttl"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if not self.benchmark_symbols:
            raise ValueError("PE_BENCHMARK_SYMBOLS must list at least one ticker")
