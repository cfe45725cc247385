"""Tests for per-location aggregation and event filters."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from shelter_stats.analysis.locations import (
    LocationStats,
    aggregate_by_location,
    filter_events,
    locations_for_breed,
    top_counts,
)
from shelter_stats.datasources.strays import IntakeEvent, MovementType

BASE = datetime(2017, 3, 1, 9, 0)


def _event(
    location: str = "Bristol",
    *,
    breed: str = "Tabby",
    species: str = "Cat",
    movement: str = "Adoption",
    stay: float = 1.0,
    start: datetime = BASE,
) -> IntakeEvent:
    return IntakeEvent(
        location=location,
        species=species,
        breed=breed,
        movement_type=movement,
        intake_at=start,
        movement_at=start + timedelta(days=stay),
    )


class TestIntakeEvent:
    """Derived event properties."""

    def test_stay_days(self) -> None:
        assert _event(stay=2.5).stay_days == pytest.approx(2.5)

    def test_negative_stay_is_kept(self) -> None:
        assert _event(stay=-3).stay_days == pytest.approx(-3.0)

    def test_location_key_trims(self) -> None:
        assert _event("  Bath \t").location_key == "Bath"

    def test_is_adoption(self) -> None:
        assert _event(movement="Adoption").is_adoption
        assert not _event(movement="Transfer").is_adoption
        assert _event(movement=MovementType.ADOPTION).is_adoption


class TestAggregateByLocation:
    """Grouping, totals and derived stats."""

    def test_groups_by_trimmed_location(self) -> None:
        events = [_event("Bath"), _event(" Bath "), _event("Bath  "), _event("Leeds")]
        stats = aggregate_by_location(events)
        assert list(stats) == ["Bath", "Leeds"]
        assert stats["Bath"].total == 3
        assert stats["Leeds"].total == 1

    def test_case_preserved(self) -> None:
        stats = aggregate_by_location([_event("bath"), _event("Bath")])
        assert set(stats) == {"bath", "Bath"}

    def test_partition_property(self) -> None:
        events = [_event(loc) for loc in ["A", "B", " A", "C", "B ", "A", "D"]]
        stats = aggregate_by_location(events)
        assert sum(s.total for s in stats.values()) == len(events)
        for loc, s in stats.items():
            assert s.total == sum(1 for e in events if e.location.strip() == loc)

    def test_average_stay(self) -> None:
        events = [_event("Bath", stay=s) for s in (2, 4, 6)]
        s = aggregate_by_location(events)["Bath"]
        assert s.stay_sum == pytest.approx(12.0)
        assert s.average_stay == pytest.approx(4.0)

    def test_adoption_count_and_rate(self) -> None:
        events = [
            _event(movement="Adoption"),
            _event(movement="Transfer"),
            _event(movement="Adoption"),
            _event(movement="Foster"),
        ]
        s = aggregate_by_location(events)["Bristol"]
        assert s.adopted == 2
        assert s.adoption_rate == pytest.approx(0.5)

    def test_breed_counts(self) -> None:
        events = [_event(breed=b) for b in ["Tabby", "Siamese", "Tabby", "Persian", "Tabby"]]
        s = aggregate_by_location(events)["Bristol"]
        assert s.breed_counts == {"Tabby": 3, "Siamese": 1, "Persian": 1}

    def test_empty_input(self) -> None:
        assert aggregate_by_location([]) == {}


class TestTopBreeds:
    """Top-K ranking and tie handling."""

    def test_descending(self) -> None:
        events = [_event(breed=b) for b in ["A", "B", "B", "C", "C", "C"]]
        s = aggregate_by_location(events)["Bristol"]
        assert s.top_breeds(3) == [("C", 3), ("B", 2), ("A", 1)]

    def test_ties_keep_first_seen_order(self) -> None:
        events = [_event(breed=b) for b in ["Z", "Y", "X", "Y", "Z", "X"]]
        s = aggregate_by_location(events)["Bristol"]
        assert s.top_breeds(2) == [("Z", 2), ("Y", 2)]

    def test_k_larger_than_breeds(self) -> None:
        s = aggregate_by_location([_event(breed="Only")])["Bristol"]
        assert s.top_breeds(5) == [("Only", 1)]

    def test_top_counts_without_limit(self) -> None:
        assert top_counts({"a": 1, "b": 3, "c": 2}) == [("b", 3), ("c", 2), ("a", 1)]


class TestLocationStatsToDict:
    def test_to_dict(self) -> None:
        s = LocationStats(location="Bath")
        for stay in (1, 3):
            s.add(_event("Bath", stay=stay, breed="Tabby"))
        d = s.to_dict()
        assert d["location"] == "Bath"
        assert d["total"] == 2
        assert d["adopted"] == 2
        assert d["average_stay_days"] == pytest.approx(2.0)
        assert d["top_breeds"] == [{"breed": "Tabby", "count": 2}]

    def test_empty_stats_do_not_divide_by_zero(self) -> None:
        s = LocationStats(location="Nowhere")
        assert s.average_stay == 0.0
        assert s.adoption_rate == 0.0


class TestFilterEvents:
    """Year/species/outcome filters."""

    EVENTS = [
        _event("A", species="Cat", movement="Adoption", start=datetime(2017, 1, 5)),
        _event("B", species="Dog", movement="Transfer", start=datetime(2017, 6, 5)),
        _event("C", species="Dog", movement="Adoption", start=datetime(2018, 2, 1)),
        _event("D", species="Cat", movement="Foster", start=datetime(2016, 12, 31)),
    ]

    def test_year(self) -> None:
        assert [e.location for e in filter_events(self.EVENTS, year=2017)] == ["A", "B"]

    def test_species(self) -> None:
        result = filter_events(self.EVENTS, species="Dog")
        assert [e.location for e in result] == ["B", "C"]

    def test_outcome(self) -> None:
        result = filter_events(self.EVENTS, outcome="Adoption")
        assert [e.location for e in result] == ["A", "C"]

    def test_all_means_no_filter(self) -> None:
        result = filter_events(self.EVENTS, species="All", outcome="All")
        assert len(result) == len(self.EVENTS)

    def test_combined(self) -> None:
        result = filter_events(self.EVENTS, year=2017, species="Dog", outcome="Transfer")
        assert [e.location for e in result] == ["B"]

    def test_no_filters(self) -> None:
        assert filter_events(self.EVENTS) == self.EVENTS


class TestLocationsForBreed:
    def test_distinct_trimmed_in_order(self) -> None:
        events = [
            _event(" Bath", breed="Pug"),
            _event("Leeds", breed="Beagle"),
            _event("Bath ", breed="Pug"),
            _event("York", breed="Pug"),
        ]
        assert locations_for_breed(events, "Pug") == ["Bath", "York"]

    def test_unknown_breed(self) -> None:
        assert locations_for_breed([_event()], "Dragon") == []
