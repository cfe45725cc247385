"""Nominatim geocoding data source.

Resolves free-text place names (shelter intake locations) to
coordinates. Blocking; the async, cached front door is
``analysis.geocoding.LocationResolver``.

Public API:
  - client: NOMINATIM_SEARCH, search (rate-limited GET /search)
  - geocode: geocode_place
"""

from shelter_stats.datasources.nominatim.client import NOMINATIM_SEARCH, search
from shelter_stats.datasources.nominatim.geocode import geocode_place

__all__ = ["NOMINATIM_SEARCH", "geocode_place", "search"]
