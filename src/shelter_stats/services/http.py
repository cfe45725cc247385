"""
Shared HTTP session for outbound API calls.

The session mounts ``TimeoutHTTPAdapter`` on both schemes, which
  - retries 429 and gateway errors with exponential backoff, and
  - applies ``DEFAULT_TIMEOUT`` to any request sent without one.

Nominatim's usage policy requires an identifying ``User-Agent``, so the
session always sends ``USER_AGENT``.

Usage::

    from shelter_stats.services.http import session

    resp = session.get("https://nominatim.openstreetmap.org/search", params={...})
    resp.raise_for_status()
"""

from __future__ import annotations

from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

DEFAULT_RETRY = Retry(
    total=3,
    backoff_factor=1,  # 0s, 1s, 2s
    status_forcelist=[429, 502, 503, 504],
    allowed_methods=["GET", "HEAD", "OPTIONS"],
    raise_on_status=False,  # callers use resp.raise_for_status()
)

DEFAULT_TIMEOUT = 15  # seconds

USER_AGENT = "shelter-stats/0.1 (animal shelter dashboards)"


class TimeoutHTTPAdapter(HTTPAdapter):
    """``HTTPAdapter`` that fills in a timeout when the caller gave none."""

    def __init__(self, *args: Any, timeout: float = DEFAULT_TIMEOUT, **kwargs: Any) -> None:
        self.timeout = timeout
        super().__init__(*args, **kwargs)

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:  # type: ignore[override]
        # Session.request passes timeout=None explicitly
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = self.timeout
        return super().send(request, **kwargs)


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = USER_AGENT,
) -> requests.Session:
    """
    Build a ``requests.Session`` for API clients.

    Args:
        retry: Retry strategy (defaults to ``DEFAULT_RETRY``).
        timeout: Seconds to wait when a request doesn't set its own timeout.
        user_agent: ``User-Agent`` header value.
    """
    s = requests.Session()
    adapter = TimeoutHTTPAdapter(max_retries=retry or DEFAULT_RETRY, timeout=timeout)
    for prefix in ("https://", "http://"):
        s.mount(prefix, adapter)
    s.headers["User-Agent"] = user_agent
    return s


#: Shared by every datasource client.
session: requests.Session = create_session()
