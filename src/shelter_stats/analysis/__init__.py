"""Analytics over loaded shelter data.

Each module turns datasource records into structures the dashboards
consume directly (plain dataclasses and dicts, serialisable to JSON).

Dependency rule: analysis/ imports datasource *models* and never reads
files. The exception is ``geocoding``, which defaults its injected
lookup to ``datasources.nominatim.geocode_place``.

Modules:
  - correlation: yearly records -> Pearson matrix for the heatmap
  - locations: intake events -> per-location stats, filters
  - geocoding: GeocodeCache + async single-flight LocationResolver
  - summary: care dashboard cards, trends, intake mix, scatter bands
  - intake: stray dashboard yearly counts, outcomes, top breeds/stays
  - narrative: scroll story steps, KPI totals, budget simulation

Adding an analysis module
-------------------------
1. Create ``analysis/{name}.py`` with pure functions::

       from shelter_stats.datasources.care import YearlyRecord

       def something(records: Sequence[YearlyRecord]) -> dict[str, Any]:
           ...

2. Call it from ``flows/build.py`` and publish the result through the store.

3. Re-export here and add tests in ``tests/test_{name}.py``.
"""

from shelter_stats.analysis.correlation import CorrelationMatrix, build_correlation_matrix, pearson
from shelter_stats.analysis.geocoding import GeocodeCache, LocationResolver
from shelter_stats.analysis.locations import (
    LocationStats,
    aggregate_by_location,
    filter_events,
    locations_for_breed,
)
from shelter_stats.analysis.narrative import NarrativeStep, build_step, merge_narrative_rows

__all__ = [
    "CorrelationMatrix",
    "GeocodeCache",
    "LocationResolver",
    "LocationStats",
    "NarrativeStep",
    "aggregate_by_location",
    "build_correlation_matrix",
    "build_step",
    "filter_events",
    "locations_for_breed",
    "merge_narrative_rows",
    "pearson",
]
