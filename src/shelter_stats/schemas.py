"""
Shared pydantic models.

Small value types that cross package boundaries (geocoder results).
Datasource and analysis records are plain dataclasses and live next to
the code that builds them.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    """A resolved latitude/longitude pair."""

    model_config = {"frozen": True}

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)

