"""Data behind the scroll-driven shelter narrative.

The story walks through five steps (intake, medical cases, adoptions,
euthanasia, KPIs). Each step needs a different slice of the yearly
data; ``build_step`` picks the slice for a step explicitly, so adding a
step means adding an enum member and a branch.

The KPI step also drives a budget simulator: historical per-dollar
rates scaled to a budget chosen on a slider.
"""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from shelter_stats.datasources.care.models import YearlyRecord
    from shelter_stats.datasources.strays.models import IntakeEvent

# Intake reasons counted as medical cases
MEDICAL_REASON = re.compile(r"injur|sick", re.IGNORECASE)

SLIDER_STEPS = 50


class NarrativeStep(StrEnum):
    INTAKE = "intake"
    MEDICAL = "medical"
    ADOPTION = "adoption"
    EUTHANASIA = "euthanasia"
    KPI = "kpi"


@dataclass
class NarrativeRow:
    """One year of the merged narrative dataset."""

    year: int
    intake: float
    medical: int
    adoption: float
    adoption_revenue: float
    euthanized: float
    budget: float


def medical_counts_by_year(events: Iterable[IntakeEvent]) -> dict[int, int]:
    """Intake events per year whose reason mentions injury or sickness."""
    counts: dict[int, int] = {}
    for e in events:
        if e.intake_reason and MEDICAL_REASON.search(e.intake_reason):
            counts[e.intake_year] = counts.get(e.intake_year, 0) + 1
    return counts


def merge_narrative_rows(
    records: Sequence[YearlyRecord],
    events: Iterable[IntakeEvent],
) -> list[NarrativeRow]:
    """Join care records with per-year medical counts (0 for years without any)."""
    medical = medical_counts_by_year(events)
    return [
        NarrativeRow(
            year=r.year,
            intake=r.get("Total_Intake"),
            medical=medical.get(r.year, 0),
            adoption=r.get("Adoptions"),
            adoption_revenue=r.get("Adoption_Revenue"),
            euthanized=r.get("Euthanized"),
            budget=r.get("Budget"),
        )
        for r in records
    ]


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass
class KpiTotals:
    total_intake: float
    total_adoptions: float
    total_euthanized: float
    adoption_rate: float  # fraction of intake, 0-1
    euthanasia_rate: float

    @classmethod
    def from_rows(cls, rows: Sequence[NarrativeRow]) -> KpiTotals:
        intake = math.fsum(r.intake for r in rows)
        adoptions = math.fsum(r.adoption for r in rows)
        euthanized = math.fsum(r.euthanized for r in rows)
        return cls(
            total_intake=intake,
            total_adoptions=adoptions,
            total_euthanized=euthanized,
            adoption_rate=_ratio(adoptions, intake),
            euthanasia_rate=_ratio(euthanized, intake),
        )


@dataclass
class BudgetSimulator:
    """Predict outcomes for a budget from historical per-dollar rates."""

    adoptions_per_dollar: float
    revenue_per_dollar: float
    euthanized_per_dollar: float
    budget_min: float
    budget_max: float
    budget_mean: float

    @property
    def step(self) -> float:
        """Slider increment: the budget range split into fixed steps."""
        return (self.budget_max - self.budget_min) / SLIDER_STEPS

    @classmethod
    def from_rows(cls, rows: Sequence[NarrativeRow]) -> BudgetSimulator:
        if not rows:
            return cls(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
        budgets = [r.budget for r in rows]
        total_budget = math.fsum(budgets)
        return cls(
            adoptions_per_dollar=_ratio(math.fsum(r.adoption for r in rows), total_budget),
            revenue_per_dollar=_ratio(math.fsum(r.adoption_revenue for r in rows), total_budget),
            euthanized_per_dollar=_ratio(math.fsum(r.euthanized for r in rows), total_budget),
            budget_min=min(budgets),
            budget_max=max(budgets),
            budget_mean=total_budget / len(budgets),
        )

    def simulate(self, budget: float) -> dict[str, int]:
        return {
            "adoptions": _round_half_up(budget * self.adoptions_per_dollar),
            "revenue": _round_half_up(budget * self.revenue_per_dollar),
            "euthanized": _round_half_up(budget * self.euthanized_per_dollar),
        }

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["step"] = self.step
        data["default"] = self.simulate(self.budget_mean)
        return data


def build_step(step: NarrativeStep | str, rows: Sequence[NarrativeRow]) -> dict[str, Any]:
    """
    Series needed by one narrative step.

    Raises:
        ValueError: ``step`` is not a known narrative step.
    """
    step = NarrativeStep(step)
    years = [r.year for r in rows]

    if step is NarrativeStep.INTAKE:
        return {"year": years, "intake": [r.intake for r in rows]}
    if step is NarrativeStep.MEDICAL:
        return {"year": years, "medical": [r.medical for r in rows]}
    if step is NarrativeStep.ADOPTION:
        return {
            "year": years,
            "adoption": [r.adoption for r in rows],
            "adoption_revenue": [r.adoption_revenue for r in rows],
        }
    if step is NarrativeStep.EUTHANASIA:
        return {"year": years, "rate": [_ratio(r.euthanized, r.intake) for r in rows]}
    if step is NarrativeStep.KPI:
        return {
            "totals": asdict(KpiTotals.from_rows(rows)),
            "simulation": BudgetSimulator.from_rows(rows).to_dict(),
        }
    msg = f"Unhandled narrative step: {step}"
    raise ValueError(msg)


def build_story(rows: Sequence[NarrativeRow]) -> dict[str, dict[str, Any]]:
    """Every step's series, keyed by step name in story order."""
    return {str(step): build_step(step, rows) for step in NarrativeStep}
