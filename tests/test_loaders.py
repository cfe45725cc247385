"""
Tests for the care-summary and stray-animal CSV loaders.
"""

from __future__ import annotations

from datetime import datetime
from io import StringIO
from typing import TYPE_CHECKING

import pandas as pd
import pytest

from shelter_stats.datasources.care import METRICS, load_yearly_records, records_from_frame
from shelter_stats.datasources.strays import events_from_frame, load_intake_events
from shelter_stats.errors import InvalidInputError

if TYPE_CHECKING:
    from pathlib import Path

CARE_CSV = """\
Year,Number of Employees,Number of Division Vehicles,Annual Budget,Owner Surrenders,Strays,Impounds by ACO (Added in 2015),Total Intake of Animals,Adoptions,Return to Owner,Euthanized,Transported to other shelters and rescues,Fostered Animals,Service Calls,Emergency Call-Outs,Grants Received,Annual Adoption Revenue
2016,21,8,"1,450,000",410,1900,350,2660,1200,300,420,500,150,9000,310,25000,98000
2014,18,7,"1,200,000",380,2100,,2480,1050,280,560,400,120,8500,290,20000,85000
2015,20,8,"1,300,000",400,2000,300,2700,1100,290,500,450,130,8800,300,22000,90000
"""

STRAYS_CSV = """\
intakedate,movementdate,movementtype,breedname,location,speciesname,intakereason
2017-01-03 10:00,2017-01-10 10:00,Adoption,Tabby,Bristol,Cat,Stray
2017-02-01,2017-02-03,Transfer,Beagle, Bath ,Dog,Medical Emergency
2017-03-01,,Adoption,Tabby,Bristol,Cat,Stray
2017-03-05,2017-03-09,Foster,Pug,,Dog,Stray
not-a-date,2017-04-01,Adoption,Pug,Leeds,Dog,Stray
2018-05-01,2018-04-28,Reclaimed,Collie,Leeds,Dog,Abandoned
"""


class TestLoadYearlyRecords:
    """Care summary CSV -> YearlyRecord list."""

    def test_sorted_by_year(self) -> None:
        records = load_yearly_records(StringIO(CARE_CSV))
        assert [r.year for r in records] == [2014, 2015, 2016]

    def test_metric_names_mapped(self) -> None:
        records = load_yearly_records(StringIO(CARE_CSV))
        assert set(records[0].metrics) == set(METRICS)
        assert records[2]["Employees"] == 21.0
        assert records[2]["Adoption_Revenue"] == 98000.0

    def test_thousands_separator(self) -> None:
        records = load_yearly_records(StringIO(CARE_CSV))
        assert records[0]["Budget"] == 1_200_000.0

    def test_blank_cell_is_zero(self) -> None:
        """ACO impounds were not tracked before 2015."""
        records = load_yearly_records(StringIO(CARE_CSV))
        assert records[0]["Impounds_ACO"] == 0.0
        assert records[1]["Impounds_ACO"] == 300.0

    def test_missing_column_is_zero(self) -> None:
        df = pd.DataFrame({"Year": [2019], "Adoptions": [10]})
        (record,) = records_from_frame(df)
        assert record["Adoptions"] == 10.0
        assert record["Impounds_ACO"] == 0.0
        assert record["Budget"] == 0.0

    def test_header_whitespace_stripped(self) -> None:
        csv = "Year , Adoptions \n2019,5\n"
        (record,) = load_yearly_records(StringIO(csv))
        assert record["Adoptions"] == 5.0

    def test_from_path(self, tmp_path: Path) -> None:
        path = tmp_path / "care.csv"
        path.write_text(CARE_CSV)
        assert len(load_yearly_records(path)) == 3

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_yearly_records(tmp_path / "nope.csv")

    def test_no_year_column(self) -> None:
        with pytest.raises(InvalidInputError, match="Year"):
            records_from_frame(pd.DataFrame({"Adoptions": [1, 2]}))

    def test_duplicate_year(self) -> None:
        df = pd.DataFrame({"Year": [2015, 2016, 2015], "Adoptions": [1, 2, 3]})
        with pytest.raises(InvalidInputError, match="2015"):
            records_from_frame(df)

    def test_rows_without_year_dropped(self) -> None:
        df = pd.DataFrame({"Year": ["2015", "", "Total"], "Adoptions": [1, 2, 3]})
        records = records_from_frame(df)
        assert [r.year for r in records] == [2015]


class TestLoadIntakeEvents:
    """Stray-animals CSV -> IntakeEvent list."""

    def test_incomplete_rows_dropped(self) -> None:
        events = load_intake_events(StringIO(STRAYS_CSV))
        # missing movementdate, missing location, bad intake date
        assert len(events) == 3

    def test_fields(self) -> None:
        first = load_intake_events(StringIO(STRAYS_CSV))[0]
        assert first.location == "Bristol"
        assert first.species == "Cat"
        assert first.breed == "Tabby"
        assert first.movement_type == "Adoption"
        assert first.intake_at == datetime(2017, 1, 3, 10, 0)
        assert first.stay_days == pytest.approx(7.0)
        assert first.intake_reason == "Stray"

    def test_location_raw_value_kept(self) -> None:
        events = load_intake_events(StringIO(STRAYS_CSV))
        assert events[1].location == " Bath "
        assert events[1].location_key == "Bath"

    def test_negative_stay_kept(self) -> None:
        events = load_intake_events(StringIO(STRAYS_CSV))
        assert events[-1].stay_days < 0

    def test_optional_columns(self) -> None:
        csv = (
            "intakedate,movementdate,movementtype,breedname,location\n"
            "2017-01-01,2017-01-02,Adoption,Pug,York\n"
        )
        (event,) = load_intake_events(StringIO(csv))
        assert event.species == ""
        assert event.intake_reason == ""

    def test_missing_required_column(self) -> None:
        df = pd.DataFrame({"intakedate": ["2017-01-01"], "location": ["York"]})
        with pytest.raises(InvalidInputError, match="movementdate"):
            events_from_frame(df)

    def test_empty_frame(self) -> None:
        csv = "intakedate,movementdate,movementtype,breedname,location\n"
        assert load_intake_events(StringIO(csv)) == []

    def test_from_path(self, tmp_path: Path) -> None:
        path = tmp_path / "strays.csv"
        path.write_text(STRAYS_CSV)
        assert len(load_intake_events(path)) == 3
