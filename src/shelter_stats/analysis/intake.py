"""Stray-animal dashboard series: yearly intake, outcomes, breeds, stays."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from shelter_stats.analysis.locations import aggregate_by_location, top_counts
from shelter_stats.datasources.strays.models import MovementType

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from shelter_stats.datasources.strays.models import IntakeEvent


def annual_intake_counts(events: Iterable[IntakeEvent]) -> dict[int, int]:
    """Events per intake year, ascending by year."""
    counts = Counter(e.intake_year for e in events)
    return dict(sorted(counts.items()))


def movement_distribution(events: Iterable[IntakeEvent]) -> dict[str, int]:
    """Count of every movement type seen, first-seen order."""
    counts: dict[str, int] = {}
    for e in events:
        counts[e.movement_type] = counts.get(e.movement_type, 0) + 1
    return counts


def outcome_distribution(events: Iterable[IntakeEvent]) -> dict[str, int]:
    """Counts for the six known outcomes (zeros included); others are ignored."""
    counts = {str(m): 0 for m in MovementType}
    for e in events:
        if e.movement_type in counts:
            counts[e.movement_type] += 1
    return counts


def top_breeds(events: Iterable[IntakeEvent], n: int = 10) -> list[tuple[str, int]]:
    counts: dict[str, int] = {}
    for e in events:
        counts[e.breed] = counts.get(e.breed, 0) + 1
    return top_counts(counts, n)


def top_locations_by_stay(events: Sequence[IntakeEvent], n: int = 10) -> list[tuple[str, float]]:
    """Locations with the longest average stay in days, longest first."""
    averages = [(loc, s.average_stay) for loc, s in aggregate_by_location(events).items()]
    return sorted(averages, key=lambda kv: kv[1], reverse=True)[:n]
