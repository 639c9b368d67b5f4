"""
Python client for NOAA NDBC realtime standard meteorological data.

Fetch station reports, parse them into fixed-schema tables and save as Parquet.
"""

try:
    from importlib import metadata

    __version__ = metadata.version("py-ndbc")
except Exception:
    __version__ = "unknown"

from .client import NDBCClient, parse_station_metadata
from .config import ClientConfig
from .exceptions import (
    ConfigError,
    EmptyDataError,
    HeaderNotFoundError,
    MetadataCheckFailedError,
    NDBCError,
    NDBCTransportError,
    NoStandardMetRowsError,
    StationUnavailableError,
    WriteError,
)
from .models import (
    MET_FIELDS,
    BatchResult,
    HeaderMap,
    ObservationRecord,
    OutcomeKind,
    RawReport,
    StationInfo,
    StationOutcome,
)
from .parser import (
    ParseResult,
    decode_scalar,
    locate_header,
    parse_report,
    resolve_columns,
    tokenize_row,
)
from .pipeline import fetch_station_table, process_station, run_batch
from .storage import ensure_data_dir, write_station_table
from .sync import AsyncSyncBridge, fetch_station_table_sync, run_batch_sync
from .table import SCHEMA, StationTable

__all__ = [
    # Client and configuration
    "NDBCClient",
    "ClientConfig",
    "parse_station_metadata",
    # Models
    "MET_FIELDS",
    "BatchResult",
    "HeaderMap",
    "ObservationRecord",
    "OutcomeKind",
    "RawReport",
    "StationInfo",
    "StationOutcome",
    # Parsing
    "ParseResult",
    "decode_scalar",
    "locate_header",
    "parse_report",
    "resolve_columns",
    "tokenize_row",
    # Tables and storage
    "SCHEMA",
    "StationTable",
    "ensure_data_dir",
    "write_station_table",
    # Pipeline
    "fetch_station_table",
    "process_station",
    "run_batch",
    # Sync wrappers
    "AsyncSyncBridge",
    "fetch_station_table_sync",
    "run_batch_sync",
    # Exceptions
    "NDBCError",
    "StationUnavailableError",
    "NDBCTransportError",
    "EmptyDataError",
    "HeaderNotFoundError",
    "NoStandardMetRowsError",
    "WriteError",
    "MetadataCheckFailedError",
    "ConfigError",
]
