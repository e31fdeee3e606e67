"""
Projection Engine — Crypto Sentiment Accessor
───────────────────────────────────────────────
Crypto Fear & Greed index from alternative.me (single current value).
The classification is recomputed locally from the value so that the five
buckets stay fixed whatever label the upstream sends. Falls back to a
neutral reading.
"""

import logging
from typing import Optional

import httpx

from projection_engine.accessors.base import UpstreamAccessor
from projection_engine.accessors.http import get_json
from projection_engine.models.market import SentimentIndex
from projection_engine.reference_data import NEUTRAL_SENTIMENT_VALUE, classify_sentiment

log = logging.getLogger("pe.accessors.sentiment")

SENTIMENT_URL = "https://api.alternative.me/fng/"

GLOBAL_KEY = "crypto_fear_greed"


def make_index(value: int, timestamp: Optional[float] = None) -> SentimentIndex:
    value = max(0, min(100, int(value)))
    return SentimentIndex(value=value, classification=classify_sentiment(value),
                          timestamp=timestamp)


class SentimentAccessor(UpstreamAccessor[SentimentIndex]):

    category = "sentiment"
    provider = "alternative_me"

    def __init__(self, *args, url: str = SENTIMENT_URL, **kwargs):
        super().__init__(*args, **kwargs)
        self.url = url

    def normalize(self, key: str) -> str:
        return GLOBAL_KEY

    async def _fetch(self, client: httpx.AsyncClient, key: str) -> Optional[SentimentIndex]:
        data = await get_json(client, self.provider, self.url,
                              params={"limit": 1}, timeout=self.timeout)
        entries = data.get("data") if isinstance(data, dict) else None
        if not isinstance(entries, list) or not entries or not isinstance(entries[0], dict):
            log.warning("Fear & Greed payload has no usable entries")
            return None
        latest = entries[0]
        try:
            ts = latest.get("timestamp")
            return make_index(int(latest["value"]), float(ts) if ts else None)
        except (KeyError, TypeError, ValueError) as e:
            log.warning(f"Unusable Fear & Greed payload: {e}")
            return None

    def _fallback(self, key: str) -> SentimentIndex:
        return make_index(NEUTRAL_SENTIMENT_VALUE)
