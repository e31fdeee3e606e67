"""
Projection Engine — HTTP Client Helper
────────────────────────────────────────
One GET, one answer. No retries: a 429 must not be retried straight away,
and any other failure is recovered by the accessor from cache or
reference data.
"""

import logging
from typing import Any, Optional

import httpx

from projection_engine.errors import RateLimited, UpstreamUnavailable

log = logging.getLogger("pe.http")

REQUEST_TIMEOUT = 10

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept": "application/json",
    "Accept-Language": "en-US,en;q=0.9",
}


def _retry_after(r: httpx.Response) -> Optional[float]:
    raw = r.headers.get("Retry-After")
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


async def get_json(client: httpx.AsyncClient, provider: str, url: str,
                   params: dict = None, headers: dict = None,
                   timeout: float = REQUEST_TIMEOUT) -> Any:
    """
    GET url and decode JSON.
    Raises RateLimited on 429, UpstreamUnavailable on any other failure.
    """
    try:
        r = await client.get(url, params=params,
                             headers=headers or {"Accept": "application/json"},
                             timeout=timeout)
    except httpx.TimeoutException as e:
        raise UpstreamUnavailable(provider, f"timeout: {url[:60]}") from e
    except httpx.HTTPError as e:
        raise UpstreamUnavailable(provider, f"{type(e).__name__}: {e}") from e

    if r.status_code == 429:
        raise RateLimited(provider, _retry_after(r))
    if r.status_code != 200:
        raise UpstreamUnavailable(provider, f"HTTP {r.status_code} from {url[:60]}")
    try:
        return r.json()
    except ValueError as e:
        raise UpstreamUnavailable(provider, "response is not JSON") from e
