"""
Tests for fixed-schema station tables.
"""

from datetime import datetime, timezone

import pandas as pd
import pyarrow as pa
import pytest

from ndbc.models import MET_FIELDS, ObservationRecord
from ndbc.parser import parse_report
from ndbc.table import COLUMNS, SCHEMA, StationTable

from conftest import UNITS


def _report(header: str, rows):
    return "\n".join([header, UNITS] + list(rows))


class TestStationTable:
    """Test StationTable assembly and conversion."""

    def test_schema_has_fifteen_columns(self):
        assert len(SCHEMA) == 15
        assert COLUMNS[0] == "time"
        assert COLUMNS[1:] == list(MET_FIELDS)
        assert SCHEMA.field("time").type == pa.timestamp("ms", tz="UTC")

    def test_rows_match_parsed_lines(self, sample_report):
        parsed = parse_report(sample_report)
        table = StationTable.from_records(parsed.records, station_id="46042")

        assert table.num_rows == 3
        assert table.num_columns == 15
        assert table.columns == COLUMNS
        assert table.column("wdir") == [260.0, 270.0, None]

    def test_column_order_independent_of_header_order(self):
        text = _report(
            "#YY MM DD hh mm PRES WSPD WDIR",
            ["2024 01 15 00 00 1013.2 12.3 270", "2024 01 15 00 10 1013.0 11.0 265"],
        )
        table = StationTable.from_records(parse_report(text).records)

        assert table.columns == COLUMNS
        assert table.column("wdir") == [270.0, 265.0]
        assert table.column("wspd") == [12.3, 11.0]
        assert table.column("pres") == [1013.2, 1013.0]

    def test_unobserved_fields_are_all_null(self):
        text = _report("#YY MM DD hh mm WSPD", ["2024 01 15 00 00 5.5"])
        table = StationTable.from_records(parse_report(text).records)

        assert table.column("wspd") == [5.5]
        for name in MET_FIELDS:
            if name != "wspd":
                assert table.column(name) == [None]

    def test_rows_not_sorted(self):
        records = [
            ObservationRecord(datetime(2024, 1, 2, tzinfo=timezone.utc), {"wspd": 2.0}),
            ObservationRecord(datetime(2024, 1, 1, tzinfo=timezone.utc), {"wspd": 1.0}),
            ObservationRecord(datetime(2024, 1, 2, tzinfo=timezone.utc), {"wspd": 2.0}),
        ]
        table = StationTable.from_records(records)
        assert table.column("wspd") == [2.0, 1.0, 2.0]
        assert table.column("time")[1] == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_unknown_column(self):
        with pytest.raises(KeyError, match="Unknown column"):
            StationTable().column("station_id")

    def test_empty_table_keeps_schema(self):
        table = StationTable("X")
        assert table.is_empty()
        arrow = table.to_arrow()
        assert arrow.num_rows == 0
        assert arrow.schema.equals(SCHEMA)

    def test_to_arrow(self, sample_report):
        table = StationTable.from_records(parse_report(sample_report).records)
        arrow = table.to_arrow()

        assert arrow.schema.equals(SCHEMA)
        assert arrow.num_rows == 3
        assert arrow.column("wvht").null_count == 2
        assert arrow.column("time")[0].as_py() == datetime(
            2024, 1, 15, 1, 0, tzinfo=timezone.utc
        )

    def test_to_pandas(self, sample_report):
        table = StationTable.from_records(parse_report(sample_report).records)
        df = table.to_pandas()

        assert list(df.columns) == COLUMNS
        assert len(df) == 3
        assert str(df["time"].dtype) == "datetime64[ms, UTC]"
        assert str(df["wdir"].dtype) == "Float64"
        assert df["time"].iloc[1] == pd.Timestamp("2024-01-15 00:50", tz="UTC")
        assert pd.isna(df["wvht"].iloc[1])
        assert df["pres"].iloc[0] == 1013.6

    def test_to_dataframe_rejects_unknown_library(self):
        with pytest.raises(ValueError, match="Unsupported library"):
            StationTable().to_dataframe("spark")

    def test_to_polars(self, sample_report):
        pl = pytest.importorskip("polars")
        table = StationTable.from_records(parse_report(sample_report).records)
        df = table.to_dataframe("polars")

        assert isinstance(df, pl.DataFrame)
        assert df.columns == COLUMNS
        assert df.height == 3
