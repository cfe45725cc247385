"""
Prefect flows for the data pipeline.

Flows:
- build: Load the CSVs, run every analysis, geocode map locations and
  publish JSON payloads to ``derived/``

Usage (local):
    python -m shelter_stats.flows.build
    shelter-stats build --year 2017

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    python -m shelter_stats.flows.build
"""
