"""
Prefect flow that builds every dashboard payload from the input CSVs.

Loads the care summary and stray-animal movements, runs the analyses,
geocodes the map locations and writes one JSON envelope per dashboard
into ``derived/``.

Run locally:
    python -m shelter_stats.flows.build
"""

from __future__ import annotations

import asyncio
from dataclasses import asdict
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any

from prefect import flow, task
from prefect.cache_policies import NONE

from shelter_stats.analysis import intake, summary
from shelter_stats.analysis.correlation import build_correlation_matrix
from shelter_stats.analysis.geocoding import GeocodeCache, LocationResolver
from shelter_stats.analysis.locations import aggregate_by_location, filter_events
from shelter_stats.analysis.narrative import build_story, merge_narrative_rows
from shelter_stats.config import get_settings
from shelter_stats.datasources.care import METRICS, load_yearly_records
from shelter_stats.datasources.nominatim import geocode_place
from shelter_stats.datasources.strays import load_intake_events
from shelter_stats.store import DataStore

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shelter_stats.datasources.care import YearlyRecord
    from shelter_stats.datasources.strays import IntakeEvent
    from shelter_stats.schemas import Coordinates

store = DataStore(get_settings().data_dir)

# Published payloads
CARE_PATH = Path("derived/care_dashboard.json")
CORRELATION_PATH = Path("derived/correlation.json")
STRAYS_PATH = Path("derived/strays_dashboard.json")
MAP_PATH = Path("derived/location_map.json")
NARRATIVE_PATH = Path("derived/narrative.json")

DEFAULT_TREND = ("Employees", "Budget")
MAP_TOP_BREEDS = 5


# =============================================================================
# Loading
# =============================================================================


@task(name="load-care")
def load_care(path: Path) -> list[YearlyRecord]:
    """Load yearly care records from CSV."""
    return load_yearly_records(path)


@task(name="load-strays")
def load_strays(path: Path) -> list[IntakeEvent]:
    """Load stray-animal movement events from CSV."""
    return load_intake_events(path)


# =============================================================================
# Payloads
# =============================================================================


@task(name="build-care-dashboard")
def build_care_dashboard(records: list[YearlyRecord]) -> dict[str, Any]:
    """Summary cards, overview/trend series, intake mix and scatter points."""
    points, thresholds = summary.scatter_points(records)
    return {
        "cards": [c.to_dict() for c in summary.build_summary_cards(records)],
        "overview": summary.metric_series(records, summary.OVERVIEW_METRICS),
        "trend": summary.metric_series(records, DEFAULT_TREND),
        "intake_composition": summary.intake_composition(records),
        "scatter": {
            "points": [asdict(p) for p in points],
            "euthanized_thresholds": list(thresholds) if thresholds else None,
        },
        "years": {str(r.year): r.metrics for r in records},
    }


@task(name="build-correlation")
def build_correlation(records: list[YearlyRecord]) -> dict[str, Any]:
    """Pearson matrix over every tracked metric."""
    return build_correlation_matrix(records, METRICS).to_dict()


@task(name="build-strays-dashboard")
def build_strays_dashboard(events: list[IntakeEvent]) -> dict[str, Any]:
    """Whole-dataset charts for the stray-animals page."""
    return {
        "annual_intake": {str(y): n for y, n in intake.annual_intake_counts(events).items()},
        "movement_distribution": intake.movement_distribution(events),
        "top_breeds": [{"breed": b, "count": n} for b, n in intake.top_breeds(events)],
        "top_locations_by_stay": [
            {"location": loc, "average_stay_days": avg}
            for loc, avg in intake.top_locations_by_stay(events)
        ],
    }


def resolve_locations(resolver: LocationResolver, locations: Sequence[str]) -> dict[str, Coordinates]:
    """Run a batch of lookups to completion on a fresh event loop."""
    return asyncio.run(resolver.resolve_many(locations))


@task(name="build-location-map", cache_policy=NONE)
def build_location_map(
    events: list[IntakeEvent],
    resolver: LocationResolver | None,
    year: int | None = None,
    species: str | None = None,
    outcome: str | None = None,
) -> dict[str, Any]:
    """
    Per-location markers for the filtered events.

    Locations the geocoder can't place are listed under ``unresolved``
    instead of failing the build. With no resolver, every location is
    reported without coordinates.
    """
    selected = filter_events(events, year=year, species=species, outcome=outcome)
    stats = aggregate_by_location(selected)
    coords = resolve_locations(resolver, list(stats)) if resolver else {}

    markers: list[dict[str, Any]] = []
    unresolved: list[str] = []
    for location, s in stats.items():
        entry = s.to_dict()
        c = coords.get(location)
        if c is None:
            unresolved.append(location)
            if resolver:
                continue
        else:
            entry.update(lat=c.lat, lon=c.lon)
        markers.append(entry)

    return {
        "filters": {"year": year, "species": species, "outcome": outcome},
        "markers": markers,
        "unresolved": unresolved,
        "outcomes": intake.outcome_distribution(selected),
        "top_breeds": [
            {"breed": b, "count": n} for b, n in intake.top_breeds(selected, MAP_TOP_BREEDS)
        ],
    }


@task(name="build-narrative")
def build_narrative(records: list[YearlyRecord], events: list[IntakeEvent]) -> dict[str, Any]:
    """Series for each scroll step, plus the merged yearly rows."""
    rows = merge_narrative_rows(records, events)
    return {"rows": [asdict(r) for r in rows], "steps": build_story(rows)}


@task(name="publish")
def publish(path: Path, payload: Any, source: str, meta: dict[str, Any] | None = None) -> Path:
    """Write a payload envelope via the store."""
    return store.write(path, payload, source=source, **(meta or {}))


# =============================================================================
# Flow
# =============================================================================


@flow(name="build-dashboards", log_prints=True)
def build_all(
    year: int | None = None,
    species: str | None = None,
    outcome: str | None = None,
    geocode: bool = True,
) -> dict[str, Any]:
    """
    Build every dashboard payload.

    Args:
        year: Intake year for the map (defaults to ``settings.default_year``).
        species: Species filter for the map (None/"All" for any).
        outcome: Outcome filter for the map (None/"All" for any).
        geocode: Resolve map locations through Nominatim.
    """
    settings = get_settings()
    year = settings.default_year if year is None else year
    results: dict[str, Any] = {}

    print(f"Loading care summary from {settings.care_csv}...")
    records = load_care(settings.care_csv)
    print(f"Loaded {len(records)} years of care data.")

    print(f"Loading stray-animal movements from {settings.strays_csv}...")
    events = load_strays(settings.strays_csv)
    print(f"Loaded {len(events)} movement records.")

    care_source = settings.care_csv.name
    strays_source = settings.strays_csv.name

    publish(CARE_PATH, build_care_dashboard(records), source=care_source)
    if records:
        correlation = build_correlation(records)
        publish(CORRELATION_PATH, correlation, source=care_source)
        results["correlation_metrics"] = len(correlation["metrics"])
    else:
        print("Warning: no care records, skipping correlation matrix.")

    publish(STRAYS_PATH, build_strays_dashboard(events), source=strays_source)

    resolver = None
    if geocode:
        # One cache per build; every lookup in this run shares it.
        lookup = partial(
            geocode_place,
            base_url=settings.geocoder_url,
            accept_language=settings.accept_language,
        )
        resolver = LocationResolver(
            GeocodeCache(),
            lookup,
            timeout=settings.geocode_timeout,
            max_concurrency=settings.geocode_concurrency,
        )

    print(f"Aggregating locations for {year}...")
    location_map = build_location_map(events, resolver, year, species, outcome)
    publish(MAP_PATH, location_map, source=f"{strays_source} + nominatim", meta={"year": year})
    results["map_markers"] = len(location_map["markers"])
    results["map_unresolved"] = len(location_map["unresolved"])
    if location_map["unresolved"]:
        print(f"Could not geocode {len(location_map['unresolved'])} locations.")

    publish(
        NARRATIVE_PATH,
        build_narrative(records, events),
        source=f"{care_source} + {strays_source}",
    )

    results["years"] = len(records)
    results["events"] = len(events)
    print(f"Payloads written to {store.derived}")
    return results


if __name__ == "__main__":
    result = build_all()
    print(f"Flow complete: {result}")
