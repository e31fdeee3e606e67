"""
Projection Engine — Quote Accessor
────────────────────────────────────
Equity / ETF / index quotes from the Yahoo Finance v8 chart endpoint
(free, no key). There is no static fallback for prices: when neither the
live call nor the cache can answer, the quote is absent.
"""

import logging
import re
import time
from typing import Optional

import httpx

from projection_engine.accessors.base import UpstreamAccessor
from projection_engine.accessors.http import BROWSER_HEADERS, get_json
from projection_engine.errors import InvalidIdentifier
from projection_engine.models.market import Quote
from projection_engine.reference_data import EXCHANGE_PREFIX_SUFFIX

log = logging.getLogger("pe.accessors.quotes")

YAHOO_CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"

_SYMBOL_RE = re.compile(r"^[A-Z0-9.\-=^]{1,20}$")


def normalise_symbol(symbol: str) -> str:
    symbol = (symbol or "").upper().strip()
    for prefix, suffix in EXCHANGE_PREFIX_SUFFIX.items():
        if symbol.startswith(prefix):
            return symbol[len(prefix):] + suffix
    return symbol


def parse_chart(symbol: str, data: dict) -> Optional[Quote]:
    """Build a Quote from a v8 chart payload, or None if it has no price."""
    result = (data or {}).get("chart", {}).get("result") or []
    if not result:
        return None
    meta = result[0].get("meta") or {}
    price = meta.get("regularMarketPrice") or meta.get("previousClose")
    if not price:
        return None
    prev_close = meta.get("previousClose") or meta.get("chartPreviousClose") or price
    change     = price - prev_close
    change_pct = (change / prev_close * 100) if prev_close else 0.0
    volume     = meta.get("regularMarketVolume")
    return Quote(
        symbol=symbol,
        price=round(float(price), 4),
        change=round(float(change), 4),
        change_percent=round(float(change_pct), 4),
        volume=int(volume) if volume is not None else None,
        market_cap=meta.get("marketCap"),
        currency=meta.get("currency", "USD"),
        fetched_at=time.time(),
    )


class QuoteAccessor(UpstreamAccessor[Quote]):

    category = "quote"
    provider = "yahoo"

    def __init__(self, *args, url: str = YAHOO_CHART_URL, **kwargs):
        super().__init__(*args, **kwargs)
        self.url = url

    def normalize(self, key: str) -> str:
        symbol = normalise_symbol(key)
        if not _SYMBOL_RE.match(symbol):
            raise InvalidIdentifier(f"Unsupported symbol: '{key}'")
        return symbol

    async def _fetch(self, client: httpx.AsyncClient, key: str) -> Optional[Quote]:
        data = await get_json(client, self.provider, self.url.format(symbol=key),
                              params={"interval": "1d", "range": "1d"},
                              headers=BROWSER_HEADERS, timeout=self.timeout)
        try:
            return parse_chart(key, data)
        except (AttributeError, TypeError, ValueError) as e:
            log.warning(f"Parse error for {key}: {e}")
            return None
