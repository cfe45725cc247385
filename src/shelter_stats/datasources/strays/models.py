"""Stray-animal movement data model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

SECONDS_PER_DAY = 86_400

# CSV columns a row must have (non-empty) to be kept
REQUIRED_COLUMNS = ("intakedate", "movementdate", "movementtype", "breedname", "location")


class MovementType(StrEnum):
    """Outcome of an animal movement.

    The CSV can carry other values; events keep the raw string, so
    compare with ``==`` rather than converting.
    """

    ADOPTION = "Adoption"
    FOSTER = "Foster"
    RECLAIMED = "Reclaimed"
    TRANSFER = "Transfer"
    RELEASED_TO_WILD = "Released To Wild"
    STOLEN = "Stolen"


@dataclass(frozen=True)
class IntakeEvent:
    """One animal-movement row: intake and the outcome that followed."""

    location: str
    species: str
    breed: str
    movement_type: str
    intake_at: datetime
    movement_at: datetime
    intake_reason: str = ""

    @property
    def location_key(self) -> str:
        """Location with surrounding whitespace removed (case preserved)."""
        return self.location.strip()

    @property
    def intake_year(self) -> int:
        return self.intake_at.year

    @property
    def stay_days(self) -> float:
        """Days between intake and movement. Negative when the row is inconsistent."""
        return (self.movement_at - self.intake_at).total_seconds() / SECONDS_PER_DAY

    @property
    def is_adoption(self) -> bool:
        return self.movement_type == MovementType.ADOPTION
