"""Load the stray-animals CSV into ``IntakeEvent`` objects."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

import pandas as pd

from shelter_stats.datasources.strays.models import REQUIRED_COLUMNS, IntakeEvent
from shelter_stats.errors import InvalidInputError

if TYPE_CHECKING:
    from pathlib import Path


def events_from_frame(df: pd.DataFrame) -> list[IntakeEvent]:
    """
    Convert a stray-animals DataFrame (all string columns) into events.

    Rows missing any of ``REQUIRED_COLUMNS`` or carrying an unparseable
    date are dropped. ``speciesname`` and ``intakereason`` are optional.

    Raises:
        InvalidInputError: A required column is absent from the header.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        msg = f"Stray-animals data is missing columns: {missing}"
        raise InvalidInputError(msg)

    df = df.fillna("")
    keep = pd.Series(True, index=df.index)
    for column in REQUIRED_COLUMNS:
        keep &= df[column].astype(str).str.strip() != ""
    df = df.loc[keep].copy()

    df["_intake_at"] = pd.to_datetime(df["intakedate"], errors="coerce", format="mixed")
    df["_movement_at"] = pd.to_datetime(df["movementdate"], errors="coerce", format="mixed")
    df = df.loc[df["_intake_at"].notna() & df["_movement_at"].notna()]

    has_species = "speciesname" in df.columns
    has_reason = "intakereason" in df.columns

    events: list[IntakeEvent] = []
    for _, row in df.iterrows():
        events.append(
            IntakeEvent(
                location=str(row["location"]),
                species=str(row["speciesname"]) if has_species else "",
                breed=str(row["breedname"]),
                movement_type=str(row["movementtype"]).strip(),
                intake_at=row["_intake_at"].to_pydatetime(),
                movement_at=row["_movement_at"].to_pydatetime(),
                intake_reason=str(row["intakereason"]) if has_reason else "",
            )
        )
    return events


def load_intake_events(source: Path | str | IO[str]) -> list[IntakeEvent]:
    """Read ``stray_animals_data.csv`` (path or open file) into events."""
    df = pd.read_csv(source, dtype=str, keep_default_na=False, skip_blank_lines=True)
    df.columns = [str(c).strip() for c in df.columns]
    return events_from_frame(df)
