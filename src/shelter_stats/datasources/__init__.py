"""Input data sources.

Each subdirectory is one source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── models.py         # Dataclasses for parsed rows (optional)
    ├── client.py         # API URLs, constants, rate limiting (remote sources)
    └── {feature}.py      # Load/fetch functions

Sources:
  - care/       yearly care summary CSV -> YearlyRecord
  - strays/     stray-animal movement CSV -> IntakeEvent
  - nominatim/  place name -> Coordinates (OpenStreetMap)

Adding a new datasource
-----------------------
1. Create ``datasources/{name}/`` with the files above.
   See ``care/`` for a CSV source, ``nominatim/`` for a remote one.

2. Remote sources go through the shared session::

       from shelter_stats.services.http import session

       def fetch_something(query) -> dict[str, Any]:
           resp = session.get(API_URL, params={...})
           resp.raise_for_status()
           return resp.json()

3. Re-export public API in ``__init__.py`` with ``__all__``.

4. Wire into ``flows/build.py`` with a ``@task`` that loads the data.

5. Add tests in ``tests/test_{name}.py``.
"""
