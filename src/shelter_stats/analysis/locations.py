"""Per-location aggregation of stray-animal movements.

Groups intake events by where the animal was found and summarises each
place for the map markers: how many animals, how many were adopted, how
long they stayed, and which breeds dominate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shelter_stats.datasources.strays.models import IntakeEvent

#: Filter value meaning "don't filter on this field" (dashboard dropdowns).
ALL = "All"


@dataclass
class LocationStats:
    """Running totals for one location key."""

    location: str
    total: int = 0
    adopted: int = 0
    stay_sum: float = 0.0
    breed_counts: dict[str, int] = field(default_factory=dict)

    def add(self, event: IntakeEvent) -> None:
        self.total += 1
        if event.is_adoption:
            self.adopted += 1
        self.stay_sum += event.stay_days
        self.breed_counts[event.breed] = self.breed_counts.get(event.breed, 0) + 1

    @property
    def average_stay(self) -> float:
        """Mean stay in days; 0.0 for an empty stats object."""
        return self.stay_sum / self.total if self.total else 0.0

    @property
    def adoption_rate(self) -> float:
        return self.adopted / self.total if self.total else 0.0

    def top_breeds(self, k: int = 3) -> list[tuple[str, int]]:
        """Most frequent breeds, count descending; ties keep first-seen order."""
        return top_counts(self.breed_counts, k)

    def to_dict(self, top_k: int = 3) -> dict[str, Any]:
        return {
            "location": self.location,
            "total": self.total,
            "adopted": self.adopted,
            "adoption_rate": self.adoption_rate,
            "average_stay_days": self.average_stay,
            "top_breeds": [{"breed": b, "count": c} for b, c in self.top_breeds(top_k)],
        }


def top_counts(counts: dict[str, int], k: int | None = None) -> list[tuple[str, int]]:
    """Sort a count mapping descending. ``sorted`` is stable, so ties stay in insertion order."""
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return ranked if k is None else ranked[:k]


def aggregate_by_location(events: Iterable[IntakeEvent]) -> dict[str, LocationStats]:
    """
    Group events by trimmed location and accumulate their stats.

    Every event lands in exactly one group, so the totals add up to the
    number of events. Locations appear in first-seen order.
    """
    stats: dict[str, LocationStats] = {}
    for event in events:
        key = event.location_key
        entry = stats.get(key)
        if entry is None:
            entry = stats[key] = LocationStats(location=key)
        entry.add(event)
    return stats


def _matches(value: str, wanted: str | None) -> bool:
    return wanted is None or wanted == ALL or value == wanted


def filter_events(
    events: Iterable[IntakeEvent],
    *,
    year: int | None = None,
    species: str | None = None,
    outcome: str | None = None,
) -> list[IntakeEvent]:
    """
    Keep events matching the map filters.

    Args:
        events: Events to filter.
        year: Intake year, or None for every year.
        species: Species name; None or ``"All"`` for any species.
        outcome: Movement type; None or ``"All"`` for any outcome.
    """
    return [
        e
        for e in events
        if (year is None or e.intake_year == year)
        and _matches(e.species, species)
        and _matches(e.movement_type, outcome)
    ]


def locations_for_breed(events: Iterable[IntakeEvent], breed: str) -> list[str]:
    """Distinct trimmed locations where ``breed`` was taken in, first-seen order."""
    seen: dict[str, None] = {}
    for event in events:
        if event.breed == breed:
            seen.setdefault(event.location_key, None)
    return list(seen)
