"""Yearly care-summary data model and column mapping."""

from __future__ import annotations

from dataclasses import dataclass, field

# Metric name -> CSV column header in animal_care_data.csv
CARE_COLUMNS: dict[str, str] = {
    "Employees": "Number of Employees",
    "Vehicles": "Number of Division Vehicles",
    "Budget": "Annual Budget",
    "Owner_Surrenders": "Owner Surrenders",
    "Strays": "Strays",
    "Impounds_ACO": "Impounds by ACO (Added in 2015)",
    "Total_Intake": "Total Intake of Animals",
    "Adoptions": "Adoptions",
    "Return_to_Owner": "Return to Owner",
    "Euthanized": "Euthanized",
    "Transported": "Transported to other shelters and rescues",
    "Fostered": "Fostered Animals",
    "Service_Calls": "Service Calls",
    "Emergency_Calls": "Emergency Call-Outs",
    "Grants": "Grants Received",
    "Adoption_Revenue": "Annual Adoption Revenue",
}

#: Every tracked metric, in heatmap row/column order.
METRICS: tuple[str, ...] = tuple(CARE_COLUMNS)

YEAR_COLUMN = "Year"


@dataclass(frozen=True)
class YearlyRecord:
    """One year of shelter operations: metric name -> value."""

    year: int
    metrics: dict[str, float] = field(default_factory=dict)

    def __getitem__(self, metric: str) -> float:
        return self.metrics[metric]

    def get(self, metric: str, default: float = 0.0) -> float:
        return self.metrics.get(metric, default)
