"""
Projection Engine — Forex Accessor
────────────────────────────────────
Spot rates from exchangerate-api (free tier, keyed by base currency).
Keys are "FROM_TO". A target currency missing from the upstream table is
absent rather than guessed.
"""

import logging
import re
from typing import Optional, Tuple

import httpx

from projection_engine.accessors.base import UpstreamAccessor
from projection_engine.accessors.http import get_json
from projection_engine.errors import InvalidIdentifier
from projection_engine.models.market import ForexRate

log = logging.getLogger("pe.accessors.forex")

FOREX_URL = "https://api.exchangerate-api.com/v4/latest/{base}"

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


def pair_key(from_currency: str, to_currency: str) -> str:
    return f"{(from_currency or '').upper().strip()}_{(to_currency or '').upper().strip()}"


def split_pair(key: str) -> Tuple[str, str]:
    base, _, quote = key.partition("_")
    return base, quote


class ForexAccessor(UpstreamAccessor[ForexRate]):

    category = "forex"
    provider = "exchangerate"

    def __init__(self, *args, url: str = FOREX_URL, **kwargs):
        super().__init__(*args, **kwargs)
        self.url = url

    def normalize(self, key: str) -> str:
        base, quote = split_pair((key or "").upper().strip())
        if not (_CURRENCY_RE.match(base) and _CURRENCY_RE.match(quote)):
            raise InvalidIdentifier(f"Unsupported currency pair: '{key}'")
        return f"{base}_{quote}"

    async def get(self, client: httpx.AsyncClient, key: str) -> Optional[ForexRate]:
        key = self.normalize(key)
        base, quote = split_pair(key)
        if base == quote:
            return ForexRate(from_currency=base, to_currency=quote, rate=1.0)
        return await super().get(client, key)

    async def _fetch(self, client: httpx.AsyncClient, key: str) -> Optional[ForexRate]:
        base, quote = split_pair(key)
        data = await get_json(client, self.provider, self.url.format(base=base),
                              timeout=self.timeout)
        rates = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(rates, dict):
            log.warning(f"No rate table for {base}")
            return None
        rate = rates.get(quote)
        if not rate:
            return None
        try:
            updated = data.get("time_last_updated")
            return ForexRate(
                from_currency=base,
                to_currency=quote,
                rate=float(rate),
                last_updated=float(updated) if updated is not None else None,
            )
        except (TypeError, ValueError) as e:
            log.warning(f"Parse error for {key}: {e}")
            return None
