"""Async, cached geocoding of location strings.

``GeocodeCache`` is created once by the application entry point and
handed to every ``LocationResolver`` so all lookups in a session share
it. Entries move through::

    Unseen -> Pending -> Resolved(coords)   cached for the session
                      -> Unresolved         not cached, next call retries

Concurrent ``resolve`` calls for the same uncached location share one
in-flight lookup (single-flight). Each lookup is bounded by a timeout,
and any failure comes back as ``None`` instead of an exception. That
covers no match, network errors, timeouts and errors raised by an
injected lookup. Cancellation still propagates.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import requests

from shelter_stats.datasources.nominatim import geocode_place

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from shelter_stats.schemas import Coordinates

logger = logging.getLogger(__name__)

#: Failures treated as "unresolved". TimeoutError is an OSError.
GEOCODE_ERRORS: tuple[type[BaseException], ...] = (requests.RequestException, ValueError, OSError)

DEFAULT_TIMEOUT = 10.0
DEFAULT_CONCURRENCY = 4


class GeocodeCache:
    """Location string -> coordinates. Grows monotonically, never evicts."""

    def __init__(self, entries: dict[str, Coordinates] | None = None) -> None:
        self._entries: dict[str, Coordinates] = dict(entries or {})

    def get(self, location: str) -> Coordinates | None:
        return self._entries.get(location)

    def put(self, location: str, coords: Coordinates) -> Coordinates:
        """Store ``coords`` unless the key is already set; returns the stored value."""
        return self._entries.setdefault(location, coords)

    def __contains__(self, location: object) -> bool:
        return location in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def snapshot(self) -> dict[str, Coordinates]:
        """Copy of the current entries."""
        return dict(self._entries)


class LocationResolver:
    """Resolve location strings through a shared ``GeocodeCache``."""

    def __init__(
        self,
        cache: GeocodeCache,
        lookup: Callable[[str], Coordinates | None] = geocode_place,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        self.cache = cache
        self.timeout = timeout
        self.max_concurrency = max_concurrency
        #: External lookups started (cache hits and shared waits don't count).
        self.lookup_count = 0
        self._lookup = lookup
        self._pending: dict[str, asyncio.Task[Coordinates | None]] = {}
        self._semaphore: asyncio.Semaphore | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def _limiter(self) -> asyncio.Semaphore:
        # Semaphores bind to the loop they're first awaited on.
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._loop is not loop:
            self._semaphore = asyncio.Semaphore(self.max_concurrency)
            self._loop = loop
        return self._semaphore

    async def resolve(self, location: str) -> Coordinates | None:
        """
        Coordinates for ``location``, or None if it can't be resolved right now.

        A cached hit returns immediately. Otherwise the caller joins the
        pending lookup for this key, starting one if none is running.
        Cancelling the caller leaves the shared lookup running for others.
        """
        cached = self.cache.get(location)
        if cached is not None:
            return cached

        task = self._pending.get(location)
        if task is None:
            task = asyncio.create_task(self._lookup_once(location))
            self._pending[location] = task
            task.add_done_callback(lambda t, key=location: self._forget(key, t))
        return await asyncio.shield(task)

    def _forget(self, location: str, task: asyncio.Task[Coordinates | None]) -> None:
        if self._pending.get(location) is task:
            del self._pending[location]

    async def _lookup_once(self, location: str) -> Coordinates | None:
        async with self._limiter():
            cached = self.cache.get(location)
            if cached is not None:
                return cached

            self.lookup_count += 1
            try:
                coords = await asyncio.wait_for(
                    asyncio.to_thread(self._lookup, location), timeout=self.timeout
                )
            except TimeoutError:
                logger.warning("Geocode timed out after %.1fs: %r", self.timeout, location)
                return None
            except GEOCODE_ERRORS as e:
                logger.warning("Geocode error for %r: %s", location, e)
                return None
            except Exception as e:
                # injected lookups can raise anything
                logger.warning("Geocode lookup failed for %r: %r", location, e)
                return None

        if coords is None:
            logger.info("No geocode match for %r", location)
            return None
        return self.cache.put(location, coords)

    async def resolve_many(self, locations: Iterable[str]) -> dict[str, Coordinates]:
        """
        Resolve a batch concurrently; unresolved locations are left out.

        Result keys keep the first-seen order of ``locations``.
        """
        unique = list(dict.fromkeys(locations))
        results = await asyncio.gather(*(self.resolve(loc) for loc in unique))
        return {loc: coords for loc, coords in zip(unique, results, strict=True) if coords is not None}
