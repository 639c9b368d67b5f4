"""
Exceptions for NDBC operations.
"""

from typing import Optional

from .models import OutcomeKind


class NDBCError(Exception):
    """Base exception for NDBC-related errors."""

    kind: Optional[OutcomeKind] = None

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class StationUnavailableError(NDBCError):
    """Realtime report not found for the station (HTTP 404)."""

    kind = OutcomeKind.UNAVAILABLE


class NDBCTransportError(NDBCError):
    """Network, timeout or unexpected HTTP status while fetching."""

    kind = OutcomeKind.TRANSPORT_ERROR


class EmptyDataError(NDBCError):
    """Report body has no data-bearing lines."""

    kind = OutcomeKind.EMPTY_DATA


class HeaderNotFoundError(NDBCError):
    """No standard meteorological header row before the first data line."""

    kind = OutcomeKind.HEADER_NOT_FOUND


class NoStandardMetRowsError(NDBCError):
    """Header located but no data line yielded a complete timestamp."""

    kind = OutcomeKind.NO_STANDARD_MET_ROWS


class WriteError(NDBCError):
    """Station table could not be persisted."""

    kind = OutcomeKind.WRITE_ERROR


class MetadataCheckFailedError(NDBCError):
    """Station metadata could not be fetched or did not look right."""

    pass


class ConfigError(NDBCError):
    """Invalid configuration value."""

    pass
