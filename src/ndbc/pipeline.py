"""
Per-station ingestion pipeline and batch driver.

Each station runs fetch -> validate -> parse -> assemble -> write. Failures
are turned into a StationOutcome for that station and never stop the batch.
"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .client import NDBCClient
from .config import ClientConfig
from .exceptions import MetadataCheckFailedError, NDBCError
from .models import BatchResult, OutcomeKind, StationInfo, StationOutcome
from .parser import parse_report
from .storage import ensure_data_dir, write_station_table
from .table import StationTable
from .utils import add_sync_version

logger = logging.getLogger(__name__)


@add_sync_version
async def fetch_station_table(
    station_id: str, client: Optional[NDBCClient] = None
) -> StationTable:
    """
    Fetch and parse one station's realtime report without writing it.

    Args:
        station_id: Station identifier
        client: NDBC client instance. If not provided, creates a temporary client

    Returns:
        StationTable with the fixed output schema

    Raises:
        NDBCError: Any station-scoped failure (unavailable, empty, no header, ...)
    """
    if client is None:
        async with NDBCClient() as temp_client:
            return await fetch_station_table(station_id, client=temp_client)

    report = await client.fetch_realtime(station_id)
    parsed = parse_report(report.text, station_id=station_id)
    return StationTable.from_records(parsed.records, station_id=station_id)


async def process_station(
    client: NDBCClient, station_id: str, out_dir: Union[str, Path]
) -> StationOutcome:
    """
    Run the full pipeline for one station and report its outcome.

    Returns:
        StationOutcome.done with the written path, or StationOutcome.failed
        with the failure kind and message
    """
    try:
        table = await fetch_station_table(station_id, client=client)
        path = write_station_table(table, out_dir, station_id)
    except NDBCError as e:
        kind = e.kind or OutcomeKind.TRANSPORT_ERROR
        return StationOutcome.failed(station_id, kind, str(e))
    return StationOutcome.done(station_id, path, table.num_rows)


async def check_station_metadata(
    client: NDBCClient,
) -> Dict[str, StationInfo]:
    """Freshness check against the station metadata document.

    Raises:
        MetadataCheckFailedError: If the metadata is unavailable or malformed
    """
    return await client.fetch_station_metadata()


async def _run_one(
    client: NDBCClient, station_id: str, out_dir: Union[str, Path]
) -> StationOutcome:
    outcome = await process_station(client, station_id, out_dir)
    if not outcome.ok:
        logger.warning(
            f"{station_id}: failed to process station "
            f"({outcome.kind.value}): {outcome.message}"
        )
    return outcome


async def _process_all(
    client: NDBCClient,
    station_ids: Sequence[str],
    out_dir: Union[str, Path],
    max_concurrent: int,
) -> List[StationOutcome]:
    if max_concurrent <= 1:
        outcomes = []
        for station_id in station_ids:
            outcomes.append(await _run_one(client, station_id, out_dir))
        return outcomes

    semaphore = asyncio.Semaphore(max_concurrent)

    async def _bounded(station_id: str) -> StationOutcome:
        async with semaphore:
            return await _run_one(client, station_id, out_dir)

    # gather keeps results in input order
    return list(await asyncio.gather(*(_bounded(s) for s in station_ids)))


@add_sync_version
async def run_batch(
    station_ids: Sequence[str],
    config: Optional[ClientConfig] = None,
    client: Optional[NDBCClient] = None,
    check_metadata: bool = True,
) -> BatchResult:
    """
    Fetch, parse and save each requested station.

    Stations are processed in the order given; duplicates are processed
    again. A failed station is logged and does not affect the others. The
    metadata freshness check runs alongside the station loop and its
    failure is reported on the result only.

    Args:
        station_ids: Station identifiers to process
        config: Client and output settings. Defaults to ClientConfig()
        client: NDBC client instance. If not provided, creates a temporary client
        check_metadata: Whether to run the metadata freshness check

    Returns:
        BatchResult with one StationOutcome per requested station
    """
    config = config or (client.config if client is not None else ClientConfig())
    if client is None:
        async with NDBCClient(config) as temp_client:
            return await run_batch(
                station_ids,
                config=config,
                client=temp_client,
                check_metadata=check_metadata,
            )

    out_dir = ensure_data_dir(config.out_dir, config.gitignore_path)
    result = BatchResult()

    metadata_task = None
    if check_metadata:
        metadata_task = asyncio.create_task(check_station_metadata(client))

    try:
        result.outcomes = await _process_all(
            client, station_ids, out_dir, config.max_concurrent
        )

        if metadata_task is not None:
            try:
                result.metadata = await metadata_task
                result.metadata_ok = True
            except MetadataCheckFailedError as e:
                logger.warning(f"Station metadata check failed: {e}")
                result.metadata_ok = False
                result.metadata_error = str(e)
    finally:
        if metadata_task is not None and not metadata_task.done():
            metadata_task.cancel()

    logger.info(
        f"Done: {len(result.successes)} succeeded, {len(result.failures)} failed"
    )
    return result
