"""
Parser for NDBC realtime standard meteorological (``.txt``) reports.

The realtime files are whitespace-delimited with two comment header rows::

    #YY  MM DD hh mm WDIR WSPD GST  WVHT   DPD   APD MWD   PRES  ATMP  WTMP  DEWP  VIS PTDY  TIDE
    #yr  mo dy hr mn degT m/s  m/s     m   sec   sec degT   hPa  degC  degC  degC  nmi  hPa    ft
    2024 01 15 00 00 270 12.3 15.1    MM    MM    MM  MM 1013.2  15.0  16.2    MM   MM   MM    MM

Column alignment is not stable across stations, so column positions are
resolved from the header row at parse time instead of using fixed offsets.
Missing observations are written as ``MM``.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from .exceptions import EmptyDataError, HeaderNotFoundError, NoStandardMetRowsError
from .models import MET_FIELDS, TIME_FIELDS, HeaderMap, ObservationRecord

logger = logging.getLogger(__name__)

NULL_SENTINEL = "MM"
COMMENT_CHAR = "#"

# Time columns are matched case-sensitively: "MM" is month, "mm" is minute.
TIME_TOKENS = {
    "YY": "year",
    "YYYY": "year",
    "MM": "month",
    "DD": "day",
    "hh": "hour",
    "mm": "minute",
}


@dataclass
class ParseResult:
    """Records decoded from one report plus the data lines that were skipped."""

    header: HeaderMap
    records: List[ObservationRecord] = field(default_factory=list)
    skipped_lines: List[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)


def decode_scalar(token: str, null_sentinel: str = NULL_SENTINEL) -> Optional[float]:
    """Decode one token to a float, or None for the null sentinel.

    Tokens that do not parse as a number (including ``NaN``) also decode to
    None so that one bad token never discards the rest of its line.
    """
    if token == null_sentinel:
        return None
    try:
        value = float(token)
    except ValueError:
        return None
    if value != value:  # NaN
        return None
    return value


def is_comment(line: str) -> bool:
    return line.lstrip().startswith(COMMENT_CHAR)


def data_lines(lines: Sequence[str]) -> List[str]:
    """Return the non-empty, non-comment lines of a report."""
    return [line for line in lines if line.strip() and not is_comment(line)]


def _header_tokens(line: str) -> List[str]:
    return line.strip().lstrip(COMMENT_CHAR).split()


def is_header_line(line: str) -> bool:
    """Check whether a line is the standard meteorological names header."""
    if not is_comment(line):
        return False
    tokens = _header_tokens(line)
    return (
        len(tokens) >= 5
        and tokens[0].upper().endswith("YY")
        and tokens[1] == "MM"
        and tokens[2] == "DD"
    )


def resolve_columns(tokens: Sequence[str], header_line: int = 0) -> HeaderMap:
    """
    Build the column-index map from header tokens.

    Time columns map to ``year``/``month``/``day``/``hour``/``minute``;
    meteorological columns map to their lowercase names. Unknown tokens are
    ignored and, for duplicated names, the first occurrence wins.

    Args:
        tokens: Whitespace-split header tokens (a leading ``#`` is tolerated)
        header_line: Zero-based line number of the header in the report

    Returns:
        HeaderMap of canonical name -> zero-based token position
    """
    positions: Dict[str, int] = {}
    for index, raw in enumerate(tokens):
        token = raw.lstrip(COMMENT_CHAR)
        name = TIME_TOKENS.get(token)
        if name is None and token.lower() in MET_FIELDS:
            name = token.lower()
        if name is None:
            continue
        if name in positions:
            logger.debug(f"Duplicate header column {raw!r} at {index} ignored")
            continue
        positions[name] = index
    return HeaderMap(positions=positions, header_line=header_line)


def locate_header(lines: Sequence[str]) -> HeaderMap:
    """
    Find the names header and resolve its column positions.

    The header must appear before the first data line. The units row that
    follows it is a plain comment line and carries no positions.

    Raises:
        HeaderNotFoundError: If no header line precedes the first data line
    """
    for number, line in enumerate(lines):
        if not line.strip():
            continue
        if not is_comment(line):
            raise HeaderNotFoundError(
                f"No standard met header before first data line (line {number + 1})"
            )
        if is_header_line(line):
            return resolve_columns(_header_tokens(line), header_line=number)
    raise HeaderNotFoundError("No standard met header found")


def _decode_time(tokens: Sequence[str], header: HeaderMap) -> Optional[datetime]:
    parts = []
    for default_position, name in enumerate(TIME_FIELDS):
        position = header.get(name)
        if position is None:
            position = default_position
        if position >= len(tokens):
            return None
        try:
            parts.append(int(tokens[position]))
        except ValueError:
            return None

    year, month, day, hour, minute = parts
    if 0 <= year < 100:
        year += 2000
    elif year < 1000:
        return None

    try:
        return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
    except ValueError:
        return None


def tokenize_row(line: str, header: HeaderMap) -> Optional[ObservationRecord]:
    """
    Decode one data line using the report's header map.

    Returns None when the line does not yield a complete timestamp. Fields
    missing from the header, or beyond the end of a short line, are None.
    """
    tokens = line.split()
    timestamp = _decode_time(tokens, header)
    if timestamp is None:
        return None

    values: Dict[str, Optional[float]] = {}
    for name in MET_FIELDS:
        position = header.get(name)
        if position is None or position >= len(tokens):
            values[name] = None
        else:
            values[name] = decode_scalar(tokens[position])
    return ObservationRecord(time=timestamp, values=values)


def parse_report(text: str, station_id: str = "") -> ParseResult:
    """
    Parse a realtime standard meteorological report.

    Args:
        text: Full report body
        station_id: Used only for log messages

    Returns:
        ParseResult with one record per decodable data line, in file order

    Raises:
        EmptyDataError: If the report has no data-bearing lines
        HeaderNotFoundError: If no header row precedes the data
        NoStandardMetRowsError: If no data line yields a timestamp
    """
    lines = text.splitlines()
    if not data_lines(lines):
        raise EmptyDataError("empty data")

    header = locate_header(lines)
    logger.debug(
        f"{station_id}: header at line {header.header_line + 1} "
        f"with fields {header.fields}"
    )

    result = ParseResult(header=header)
    for number, line in enumerate(lines[header.header_line + 1 :], header.header_line + 1):
        if not line.strip() or is_comment(line):
            continue
        record = tokenize_row(line, header)
        if record is None:
            logger.debug(f"{station_id}: skipping line {number + 1}: {line.strip()!r}")
            result.skipped_lines.append(number)
            continue
        result.records.append(record)

    if result.skipped_lines:
        numbers = ", ".join(str(n + 1) for n in result.skipped_lines)
        logger.warning(
            f"{station_id}: skipped {len(result.skipped_lines)} line(s) "
            f"without a valid timestamp (lines {numbers})"
        )
    if not result.records:
        raise NoStandardMetRowsError("no standard met rows found")
    return result
