"""Place name -> coordinates using the first Nominatim candidate."""

from __future__ import annotations

from typing import Any

from shelter_stats.datasources.nominatim import client
from shelter_stats.schemas import Coordinates


def _parse_candidate(candidate: dict[str, Any]) -> Coordinates:
    """Nominatim returns lat/lon as strings."""
    return Coordinates(lat=float(candidate["lat"]), lon=float(candidate["lon"]))


def geocode_place(
    place: str,
    *,
    base_url: str = client.NOMINATIM_SEARCH,
    accept_language: str = "en",
) -> Coordinates | None:
    """
    Look up a free-text place name.

    Args:
        place: Location string as it appears in the data (e.g. ``"Bristol"``).
        base_url: Search endpoint (override for a self-hosted Nominatim).
        accept_language: Preferred language for the lookup.

    Returns:
        Coordinates of the first candidate, or None when nothing matched.

    Raises:
        requests.RequestException: Network or HTTP failure.
        ValueError: Malformed response.
    """
    candidates = client.search(place, base_url=base_url, accept_language=accept_language)
    if not candidates:
        return None
    try:
        return _parse_candidate(candidates[0])
    except (KeyError, TypeError) as e:
        msg = f"Malformed Nominatim candidate for {place!r}"
        raise ValueError(msg) from e
