"""
Shared fixtures: a fake clock, canned upstream responses served through
httpx.MockTransport, and a MarketDataService wired to both.
"""

import asyncio
import os
import sys

import httpx
import pytest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from projection_engine.cache.tiered_cache import TieredCache  # noqa: E402
from projection_engine.config import Settings  # noqa: E402
from projection_engine.orchestrator.rate_limiter import TokenBucket  # noqa: E402
from projection_engine.service import MarketDataService  # noqa: E402

PROVIDERS = ("yahoo", "exchangerate", "worldbank", "alternative_me")


def run(coro):
    return asyncio.run(coro)


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def chart_payload(price, prev_close=None, volume=1_000_000):
    return {"chart": {"result": [{"meta": {
        "regularMarketPrice": price,
        "previousClose": price if prev_close is None else prev_close,
        "regularMarketVolume": volume,
        "currency": "USD",
    }}]}}


def worldbank_payload(value, year="2023"):
    return [
        {"page": 1, "pages": 1, "per_page": 5, "total": 1},
        [{"country": {"id": "US"}, "date": year, "value": value}],
    ]


def fng_payload(value):
    return {"data": [{"value": str(value), "value_classification": "whatever",
                      "timestamp": "1700000000"}]}


class FakeUpstream:
    """
    Routes requests by host. Each canned response is a JSON-able payload,
    an int HTTP status, or an exception to raise. Unknown keys get 404.
    """

    def __init__(self):
        self.quotes    = {}     # symbol -> response
        self.forex     = {}     # base currency -> response
        self.worldbank = {}     # World Bank country code -> response
        self.sentiment = fng_payload(50)
        self.calls     = []

    def count(self, fragment: str) -> int:
        return sum(1 for c in self.calls if fragment in c)

    @staticmethod
    def _respond(canned):
        if canned is None:
            return httpx.Response(404, json={})
        if isinstance(canned, Exception):
            raise canned
        if isinstance(canned, int):
            return httpx.Response(canned, json={})
        return httpx.Response(200, json=canned)

    def handler(self, request: httpx.Request) -> httpx.Response:
        host, path = request.url.host, request.url.path
        self.calls.append(f"{host}{path}")
        key = path.rstrip("/").rsplit("/", 1)[-1]
        if host == "query1.finance.yahoo.com":
            return self._respond(self.quotes.get(key))
        if host == "api.exchangerate-api.com":
            return self._respond(self.forex.get(key))
        if host == "api.worldbank.org":
            country = path.split("/country/")[1].split("/")[0]
            return self._respond(self.worldbank.get(country))
        if host == "api.alternative.me":
            return self._respond(self.sentiment)
        return httpx.Response(404, json={})


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def fast_limiters():
    return {p: TokenBucket(capacity=1000, rate=1000) for p in PROVIDERS}


@pytest.fixture
def service(upstream, clock, fast_limiters):
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
    return MarketDataService(
        settings=Settings(),
        cache=TieredCache(clock=clock),
        client=client,
        limiters=fast_limiters,
    )
