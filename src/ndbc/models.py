"""
Data models for NDBC standard meteorological reports.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

# Output field order for every station table (after the time column)
MET_FIELDS: Tuple[str, ...] = (
    "wdir",
    "wspd",
    "gst",
    "wvht",
    "dpd",
    "apd",
    "mwd",
    "pres",
    "atmp",
    "wtmp",
    "dewp",
    "vis",
    "ptdy",
    "tide",
)

TIME_FIELDS: Tuple[str, ...] = ("year", "month", "day", "hour", "minute")


class OutcomeKind(str, Enum):
    """Terminal state of one station's pipeline run."""

    SUCCESS = "success"
    UNAVAILABLE = "unavailable"
    TRANSPORT_ERROR = "transport_error"
    EMPTY_DATA = "empty_data"
    HEADER_NOT_FOUND = "header_not_found"
    NO_STANDARD_MET_ROWS = "no_standard_met_rows"
    WRITE_ERROR = "write_error"


@dataclass
class RawReport:
    """Undecoded realtime report body for one station."""

    station_id: str
    status_code: int
    text: str

    def lines(self) -> List[str]:
        return self.text.splitlines()


@dataclass(frozen=True)
class HeaderMap:
    """Column positions resolved from a report's header row.

    Built once per report and shared read-only by every data line of that
    report. Fields missing from the header are missing from ``positions``.
    """

    positions: Dict[str, int]
    header_line: int = 0

    def get(self, name: str) -> Optional[int]:
        return self.positions.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.positions

    @property
    def fields(self) -> List[str]:
        """Meteorological fields present in the header, in output order."""
        return [name for name in MET_FIELDS if name in self.positions]


@dataclass
class ObservationRecord:
    """A single decoded data line."""

    time: datetime
    values: Dict[str, Optional[float]] = field(default_factory=dict)

    def get(self, name: str) -> Optional[float]:
        return self.values.get(name)


@dataclass
class StationInfo:
    """Location of a met-enabled station from the station metadata."""

    station_id: str
    latitude: float
    longitude: float


@dataclass
class StationOutcome:
    """Result of processing one station: a written path or a failure kind."""

    station_id: str
    kind: OutcomeKind
    path: Optional[Path] = None
    message: str = ""
    rows: int = 0

    @classmethod
    def done(cls, station_id: str, path: Path, rows: int) -> "StationOutcome":
        return cls(station_id, OutcomeKind.SUCCESS, path=path, rows=rows)

    @classmethod
    def failed(
        cls, station_id: str, kind: OutcomeKind, message: str
    ) -> "StationOutcome":
        return cls(station_id, kind, message=message)

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


@dataclass
class BatchResult:
    """Outcomes of a batch run, in the order stations were requested."""

    outcomes: List[StationOutcome] = field(default_factory=list)
    metadata_ok: Optional[bool] = None
    metadata_error: str = ""
    metadata: Dict[str, StationInfo] = field(default_factory=dict)

    @property
    def successes(self) -> List[StationOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failures(self) -> List[StationOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def any_succeeded(self) -> bool:
        return bool(self.successes)
