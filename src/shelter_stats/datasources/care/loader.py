"""Load the yearly care-summary CSV into ``YearlyRecord`` objects."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

import pandas as pd

from shelter_stats.datasources.care.models import CARE_COLUMNS, YEAR_COLUMN, YearlyRecord
from shelter_stats.errors import InvalidInputError

if TYPE_CHECKING:
    from pathlib import Path


def records_from_frame(df: pd.DataFrame) -> list[YearlyRecord]:
    """
    Convert a care-summary DataFrame into records sorted by year.

    Columns are looked up by their CSV header (see ``CARE_COLUMNS``).
    Missing columns and blank or non-numeric cells become 0, as the
    ACO impound column only exists from 2015 on.

    Raises:
        InvalidInputError: No ``Year`` column, or the same year appears twice.
    """
    if YEAR_COLUMN not in df.columns:
        msg = f"Care data has no {YEAR_COLUMN!r} column"
        raise InvalidInputError(msg)

    years = pd.to_numeric(df[YEAR_COLUMN], errors="coerce")
    df = df.loc[years.notna()].copy()
    df[YEAR_COLUMN] = years.dropna().astype(int)

    duplicated = df[YEAR_COLUMN][df[YEAR_COLUMN].duplicated()]
    if not duplicated.empty:
        msg = f"Duplicate years in care data: {sorted(set(duplicated.tolist()))}"
        raise InvalidInputError(msg)

    for metric, column in CARE_COLUMNS.items():
        if column in df.columns:
            df[metric] = pd.to_numeric(df[column], errors="coerce").fillna(0).astype(float)
        else:
            df[metric] = 0.0

    df = df.sort_values(YEAR_COLUMN)
    return [
        YearlyRecord(
            year=int(row[YEAR_COLUMN]),
            metrics={metric: float(row[metric]) for metric in CARE_COLUMNS},
        )
        for _, row in df.iterrows()
    ]


def load_yearly_records(source: Path | str | IO[str]) -> list[YearlyRecord]:
    """Read ``animal_care_data.csv`` (path or open file) into sorted records."""
    df = pd.read_csv(source, skipinitialspace=True, thousands=",")
    df.columns = [str(c).strip() for c in df.columns]
    return records_from_frame(df)
