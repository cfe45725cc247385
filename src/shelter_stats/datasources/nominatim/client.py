"""
Nominatim (OpenStreetMap) geocoding client.

API docs: https://nominatim.org/release-docs/latest/api/Search/
Usage policy: https://operations.osmfoundation.org/policies/nominatim/
  - at most 1 request per second
  - identify the application with a User-Agent
"""

from __future__ import annotations

import threading
import time
from typing import Any

from shelter_stats.services.http import session

NOMINATIM_SEARCH = "https://nominatim.openstreetmap.org/search"

# ---------------------------------------------------------------------------
# Rate limiting (module-level state, shared by worker threads)
# ---------------------------------------------------------------------------
_rate_lock = threading.Lock()
_last_request_time: float = 0.0
MIN_REQUEST_INTERVAL: float = 1.0  # seconds


def _rate_limit() -> None:
    """Sleep if needed to honour the 1 req/s usage policy."""
    global _last_request_time  # noqa: PLW0603
    with _rate_lock:
        now = time.monotonic()
        elapsed = now - _last_request_time
        if elapsed < MIN_REQUEST_INTERVAL:
            time.sleep(MIN_REQUEST_INTERVAL - elapsed)
        _last_request_time = time.monotonic()


def search(
    query: str,
    *,
    base_url: str = NOMINATIM_SEARCH,
    accept_language: str = "en",
    limit: int = 1,
) -> list[dict[str, Any]]:
    """
    GET /search: free-text place search.

    Returns the raw candidate list (possibly empty). HTTP and network
    errors propagate as ``requests`` exceptions.
    """
    _rate_limit()
    params: dict[str, Any] = {"q": query, "format": "json", "limit": limit}
    headers = {"Accept-Language": accept_language}
    resp = session.get(base_url, params=params, headers=headers)
    resp.raise_for_status()
    data = resp.json()
    if not isinstance(data, list):
        msg = f"Unexpected Nominatim payload for {query!r}: {type(data).__name__}"
        raise ValueError(msg)
    return data
