"""Shelter Stats - analytics backend for animal-shelter dashboards.

Architecture::

    datasources/   CSV loaders (yearly care summary, stray intake events) and Nominatim
    analysis/      Pure logic (correlation matrix, location aggregation, narrative series)
    services/      Shared utilities (HTTP client with retry)
    store.py       JSON envelopes for published payloads (derived/)
    flows/         Prefect orchestration (build loads CSVs and publishes payloads)

Data flow: datasources → analysis → store (derived/*.json) → dashboards

The dashboards themselves (charts, maps, scroll narrative) consume the
published JSON. Nothing in this package renders.

Extension points (see each package's docstring):
  - New data source:   datasources/__init__.py
  - New analysis:      analysis/__init__.py
"""

__version__ = "0.1.0"

from shelter_stats.config import Settings
from shelter_stats.schemas import Coordinates

__all__ = ["Coordinates", "Settings", "__version__"]
