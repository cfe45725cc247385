"""Stray-animal movement data source (``stray_animals_data.csv``).

One row per animal movement: where the animal came from, what it is,
when it arrived and how it left (adoption, transfer, ...).

Public API:
  - models: IntakeEvent, MovementType
  - loader: load_intake_events, events_from_frame
"""

from shelter_stats.datasources.strays.loader import events_from_frame, load_intake_events
from shelter_stats.datasources.strays.models import IntakeEvent, MovementType

__all__ = [
    "IntakeEvent",
    "MovementType",
    "events_from_frame",
    "load_intake_events",
]
