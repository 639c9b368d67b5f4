"""
Columnar station tables with a fixed output schema.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
import pyarrow as pa

from .models import MET_FIELDS, ObservationRecord

TIME_COLUMN = "time"

# Declared up front; every station table has exactly these columns in this order.
SCHEMA = pa.schema(
    [pa.field(TIME_COLUMN, pa.timestamp("ms", tz="UTC"), nullable=False)]
    + [pa.field(name, pa.float64(), nullable=True) for name in MET_FIELDS]
)

COLUMNS: List[str] = SCHEMA.names


class StationTable:
    """Fixed-schema columnar table of observations for one station.

    Columns are filled from the record stream by field name. A field that
    never appeared in the source header becomes an all-null column. Rows keep
    the order of the source lines.
    """

    def __init__(self, station_id: str = ""):
        self.station_id = station_id
        self._time: List[datetime] = []
        self._columns: Dict[str, List[Optional[float]]] = {
            name: [] for name in MET_FIELDS
        }

    @classmethod
    def from_records(
        cls, records: Iterable[ObservationRecord], station_id: str = ""
    ) -> "StationTable":
        table = cls(station_id)
        table.extend(records)
        return table

    def append(self, record: ObservationRecord) -> None:
        self._time.append(record.time)
        for name, column in self._columns.items():
            column.append(record.get(name))

    def extend(self, records: Iterable[ObservationRecord]) -> None:
        for record in records:
            self.append(record)

    @property
    def columns(self) -> List[str]:
        return list(COLUMNS)

    @property
    def num_rows(self) -> int:
        return len(self._time)

    @property
    def num_columns(self) -> int:
        return len(COLUMNS)

    def __len__(self) -> int:
        return self.num_rows

    def is_empty(self) -> bool:
        return self.num_rows == 0

    def column(self, name: str) -> List[Any]:
        """Return a copy of one column's values."""
        if name == TIME_COLUMN:
            return list(self._time)
        if name not in self._columns:
            raise KeyError(f"Unknown column '{name}'. Available: {COLUMNS}")
        return list(self._columns[name])

    def to_arrow(self) -> pa.Table:
        """Convert to a pyarrow Table with the declared schema."""
        arrays = [pa.array(self._time, type=SCHEMA.field(TIME_COLUMN).type)]
        for name in MET_FIELDS:
            arrays.append(pa.array(self._columns[name], type=pa.float64()))
        return pa.Table.from_arrays(arrays, schema=SCHEMA)

    def to_pandas(self) -> pd.DataFrame:
        """Convert to a pandas DataFrame with nullable Float64 columns."""
        data: Dict[str, Any] = {
            TIME_COLUMN: pd.Series(pd.to_datetime(self._time, utc=True)).astype(
                "datetime64[ms, UTC]"
            )
        }
        for name in MET_FIELDS:
            data[name] = pd.array(self._columns[name], dtype="Float64")
        return pd.DataFrame(data, columns=COLUMNS)

    def to_polars(self) -> Any:
        """Convert to a polars DataFrame (requires the polars extra)."""
        try:
            import polars as pl
        except ImportError:
            raise ImportError(
                "polars is required for DataFrame conversion. Install with: pip install polars"
            ) from None
        return pl.from_arrow(self.to_arrow())

    def to_dataframe(self, library: str = "pandas") -> Any:
        """Convert to a pandas or polars DataFrame."""
        if library.lower() == "pandas":
            return self.to_pandas()
        elif library.lower() == "polars":
            return self.to_polars()
        raise ValueError(f"Unsupported library: {library}. Choose 'pandas' or 'polars'.")

    def __repr__(self) -> str:
        return (
            f"StationTable(station_id={self.station_id!r}, "
            f"rows={self.num_rows}, columns={self.num_columns})"
        )
