"""
Projection Engine — Inflation Accessor
────────────────────────────────────────
Annual CPI inflation from the World Bank (indicator FP.CPI.TOTL.ZG, free,
no key). Always answers: when the live source is down or has no value for
the country, the per-country reference table fills in.
"""

import logging
import re
from typing import Optional

import httpx

from projection_engine.accessors.base import UpstreamAccessor
from projection_engine.accessors.http import get_json
from projection_engine.errors import InvalidIdentifier
from projection_engine.models.market import InflationRecord
from projection_engine.reference_data import (
    FALLBACK_INFLATION_YEAR, WORLDBANK_COUNTRY_ALIASES, fallback_inflation_rate,
)

log = logging.getLogger("pe.accessors.inflation")

WORLDBANK_URL = "https://api.worldbank.org/v2/country/{country}/indicator/FP.CPI.TOTL.ZG"

_COUNTRY_RE = re.compile(r"^[A-Z]{2,3}$")


def normalise_country(country_code: str) -> str:
    code = (country_code or "").upper().strip()
    if not _COUNTRY_RE.match(code):
        raise InvalidIdentifier(f"Unsupported country code: '{country_code}'")
    return code


def parse_worldbank(country: str, data) -> Optional[InflationRecord]:
    """
    The World Bank answers [page_meta, [observation, ...]] on success and
    [{"message": [...]}] for unknown countries.
    """
    if not isinstance(data, list) or len(data) < 2 or not isinstance(data[1], list):
        return None
    for obs in data[1]:
        if not isinstance(obs, dict):
            continue
        value = obs.get("value")
        if value is None:
            continue
        try:
            return InflationRecord(country=country, rate=float(value), year=int(obs["date"]))
        except (KeyError, TypeError, ValueError):
            continue
    return None


class InflationAccessor(UpstreamAccessor[InflationRecord]):

    category = "inflation"
    provider = "worldbank"

    def __init__(self, *args, url: str = WORLDBANK_URL, **kwargs):
        super().__init__(*args, **kwargs)
        self.url = url

    def normalize(self, key: str) -> str:
        return normalise_country(key)

    async def _fetch(self, client: httpx.AsyncClient, key: str) -> Optional[InflationRecord]:
        wb_code = WORLDBANK_COUNTRY_ALIASES.get(key, key)
        data = await get_json(client, self.provider, self.url.format(country=wb_code),
                              params={"format": "json", "mrnev": 1, "per_page": 5},
                              timeout=self.timeout)
        return parse_worldbank(key, data)

    def _fallback(self, key: str) -> InflationRecord:
        return InflationRecord(
            country=key,
            rate=fallback_inflation_rate(key),
            year=FALLBACK_INFLATION_YEAR,
        )
