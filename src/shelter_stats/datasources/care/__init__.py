"""Yearly care-summary data source (``animal_care_data.csv``).

One row per year with ~16 operational metrics (staffing, budget, intake
breakdown, outcomes, calls, revenue).

Public API:
  - models: YearlyRecord, METRICS, CARE_COLUMNS
  - loader: load_yearly_records, records_from_frame
"""

from shelter_stats.datasources.care.loader import load_yearly_records, records_from_frame
from shelter_stats.datasources.care.models import CARE_COLUMNS, METRICS, YearlyRecord

__all__ = [
    "CARE_COLUMNS",
    "METRICS",
    "YearlyRecord",
    "load_yearly_records",
    "records_from_frame",
]
