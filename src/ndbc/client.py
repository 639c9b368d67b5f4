"""
NDBC (National Data Buoy Center) client for ndbc.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, Optional, Tuple

import httpx

from .config import ClientConfig
from .exceptions import (
    MetadataCheckFailedError,
    NDBCError,
    NDBCTransportError,
    StationUnavailableError,
)
from .models import RawReport, StationInfo

logger = logging.getLogger(__name__)

METADATA_ROOT = "stations"


class NDBCClient:
    """
    Async client for NDBC realtime station reports.

    Realtime standard meteorological reports cover roughly the last 45 days
    and are published as plain text at ``realtime2/<station>.txt``. The
    station metadata XML is used to check that the service is live.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        timeout: Optional[float] = None,
    ):
        self.config = config or ClientConfig()
        if timeout is not None:
            self.config = self.config.with_overrides(timeout=timeout)
        self.timeout = self.config.timeout
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": self.config.user_agent},
            follow_redirects=True,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "NDBCClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _get(self, url: str) -> httpx.Response:
        """GET a URL, mapping transport failures to NDBC errors."""
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            return response

        except httpx.TimeoutException as e:
            raise NDBCTransportError(f"Request timeout after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise StationUnavailableError("data unavailable (404)") from e
            elif e.response.status_code == 429:
                raise NDBCTransportError("Rate limit exceeded") from e
            elif e.response.status_code >= 500:
                raise NDBCTransportError("NDBC service temporarily unavailable") from e
            else:
                raise NDBCTransportError(
                    f"HTTP error {e.response.status_code}: {e}"
                ) from e
        except httpx.RequestError as e:
            raise NDBCTransportError(f"Network error: {e}") from e
        except (httpx.InvalidURL, UnicodeError) as e:
            raise NDBCTransportError(f"Invalid request URL {url!r}: {e}") from e

    async def fetch_realtime(self, station_id: str) -> RawReport:
        """
        Download the realtime standard meteorological report for a station.

        Args:
            station_id: Station identifier (e.g., '42040', '46042', 'FPKA2')

        Returns:
            RawReport with the HTTP status and decoded text body

        Raises:
            StationUnavailableError: If the station has no realtime report
            NDBCTransportError: On network failures or other HTTP errors
        """
        url = self.config.station_url(station_id)
        logger.info(f"{station_id}: downloading realtime data from {url}")
        response = await self._get(url)
        return RawReport(
            station_id=station_id,
            status_code=response.status_code,
            text=response.text,
        )

    async def fetch_station_metadata(self) -> Dict[str, StationInfo]:
        """
        Download the station metadata XML and return met-enabled stations.

        Returns:
            Mapping of station id -> StationInfo

        Raises:
            MetadataCheckFailedError: If the document cannot be fetched, is not
                well-formed, has an unexpected root, or lists no met stations
        """
        url = self.config.metadata_url
        logger.info(f"Downloading station metadata from {url}")
        try:
            response = await self._get(url)
        except NDBCError as e:
            raise MetadataCheckFailedError(f"station metadata fetch failed: {e}") from e

        stations = parse_station_metadata(response.content)
        logger.info(f"Station metadata retrieved: {len(stations)} met stations")
        return stations


def _history_position(attrib: Dict[str, str]) -> Optional[Tuple[float, float]]:
    if attrib.get("met") != "y":
        return None
    try:
        return float(attrib["lat"]), float(attrib["lng"])
    except (KeyError, ValueError):
        return None


def parse_station_metadata(xml: bytes) -> Dict[str, StationInfo]:
    """
    Parse the NDBC station metadata document.

    For each ``<station id=...>``, the ``<history>`` entries flagged
    ``met="y"`` supply the position; the current entry (no ``stop`` date)
    is preferred over earlier ones.

    Raises:
        MetadataCheckFailedError: On malformed XML, an unexpected root
            element, or no met-enabled stations
    """
    try:
        root = ET.fromstring(xml)
    except ET.ParseError as e:
        raise MetadataCheckFailedError(f"station metadata parse error: {e}") from e

    if root.tag != METADATA_ROOT:
        raise MetadataCheckFailedError(
            f"unexpected station metadata root <{root.tag}>, expected <{METADATA_ROOT}>"
        )

    stations: Dict[str, StationInfo] = {}
    for station in root.iter("station"):
        station_id = station.attrib.get("id")
        if not station_id:
            continue

        picked: Optional[Tuple[float, float]] = None
        for history in station.iter("history"):
            position = _history_position(history.attrib)
            if position is None:
                continue
            if picked is None or not history.attrib.get("stop"):
                picked = position

        if picked is not None:
            stations[station_id] = StationInfo(station_id, picked[0], picked[1])

    if not stations:
        raise MetadataCheckFailedError("no stations with met data found in metadata")
    return stations
