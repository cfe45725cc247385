"""Care dashboard series: summary cards, trends, intake mix, scatter bands.

All functions take the year-sorted ``YearlyRecord`` list produced by
``datasources.care.load_yearly_records``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shelter_stats.datasources.care.models import YearlyRecord

# (card title, metric)
SUMMARY_CARDS: tuple[tuple[str, str], ...] = (
    ("Employees number", "Employees"),
    ("Annual Budget (USD)", "Budget"),
    ("Total intake", "Total_Intake"),
    ("Adoption", "Adoptions"),
)

OVERVIEW_METRICS: tuple[str, ...] = ("Total_Intake", "Adoptions", "Euthanized")
INTAKE_SOURCES: tuple[str, ...] = ("Owner_Surrenders", "Strays", "Impounds_ACO")

# Euthanized terciles for scatter point bands
BAND_QUANTILES: tuple[float, float] = (0.33, 0.66)


@dataclass
class SummaryCard:
    """Latest-year headline figure with change from the previous year."""

    title: str
    metric: str
    value: float
    previous: float
    delta_pct: float | None  # None when the previous value is 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "metric": self.metric,
            "value": self.value,
            "previous": self.previous,
            "delta_pct": self.delta_pct,
        }


def percent_change(current: float, previous: float) -> float | None:
    if previous == 0:
        return None
    return (current - previous) / previous * 100


def build_summary_cards(records: Sequence[YearlyRecord]) -> list[SummaryCard]:
    """Cards comparing the last two years. Empty with fewer than two records."""
    if len(records) < 2:
        return []
    latest, prev = records[-1], records[-2]
    return [
        SummaryCard(
            title=title,
            metric=metric,
            value=latest.get(metric),
            previous=prev.get(metric),
            delta_pct=percent_change(latest.get(metric), prev.get(metric)),
        )
        for title, metric in SUMMARY_CARDS
    ]


def metric_series(records: Sequence[YearlyRecord], metrics: Sequence[str]) -> dict[str, list[float]]:
    """Column-oriented series: ``{"year": [...], metric: [...], ...}``."""
    series: dict[str, list[float]] = {"year": [r.year for r in records]}
    for metric in metrics:
        series[metric] = [r.get(metric) for r in records]
    return series


def intake_composition(records: Sequence[YearlyRecord]) -> list[dict[str, float]]:
    """Per-year intake by source (owner surrender, stray, ACO impound) plus their sum."""
    rows: list[dict[str, float]] = []
    for r in records:
        row: dict[str, float] = {"year": r.year}
        for source in INTAKE_SOURCES:
            row[source] = r.get(source)
        row["total"] = math.fsum(row[s] for s in INTAKE_SOURCES)
        rows.append(row)
    return rows


def record_for_year(records: Sequence[YearlyRecord], year: int) -> YearlyRecord | None:
    return next((r for r in records if r.year == year), None)


def quantile(sorted_values: Sequence[float], p: float) -> float:
    """Linear-interpolated quantile of pre-sorted values (R type 7)."""
    if not sorted_values:
        msg = "quantile of empty sequence"
        raise ValueError(msg)
    pos = (len(sorted_values) - 1) * p
    lo = math.floor(pos)
    hi = min(lo + 1, len(sorted_values) - 1)
    return sorted_values[lo] + (sorted_values[hi] - sorted_values[lo]) * (pos - lo)


@dataclass
class ScatterPoint:
    """Budget vs adoption revenue, sized by intake, banded by euthanasia."""

    year: int
    budget: float
    adoption_revenue: float
    total_intake: float
    euthanized: float
    band: int  # 0 = low, 1 = mid, 2 = high


def scatter_points(
    records: Sequence[YearlyRecord],
) -> tuple[list[ScatterPoint], tuple[float, float] | None]:
    """
    Points for the budget/revenue comparison and the euthanized tercile cut-offs.

    A point falls in band 0 below the first cut-off, band 2 at or above
    the second, band 1 otherwise. Returns no thresholds for empty input.
    """
    if not records:
        return [], None
    euth = sorted(r.get("Euthanized") for r in records)
    low, mid = (quantile(euth, q) for q in BAND_QUANTILES)

    points = []
    for r in records:
        e = r.get("Euthanized")
        band = 0 if e < low else (1 if e < mid else 2)
        points.append(
            ScatterPoint(
                year=r.year,
                budget=r.get("Budget"),
                adoption_revenue=r.get("Adoption_Revenue"),
                total_intake=r.get("Total_Intake"),
                euthanized=e,
                band=band,
            )
        )
    return points, (low, mid)
