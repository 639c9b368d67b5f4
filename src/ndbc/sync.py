"""
Synchronous wrapper functions for ndbc.

This module provides blocking versions of the async entry points for users
who cannot use async/await syntax. Under the hood, these functions run the
async code in a fresh asyncio event loop.

Usage:
    # Instead of this async code:
    async with NDBCClient() as client:
        table = await fetch_station_table("46042", client=client)

    # Use this sync code:
    from ndbc.sync import fetch_station_table_sync
    table = fetch_station_table_sync("46042")
"""

import asyncio
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Sequence, TypeVar

if TYPE_CHECKING:
    from .config import ClientConfig
    from .models import BatchResult
    from .table import StationTable

R = TypeVar("R")


class AsyncSyncBridge:
    """Runs async functions to completion from synchronous code."""

    @staticmethod
    def run_async(
        async_fn: Callable[..., Awaitable[R]],
        args: tuple = (),
        kwargs: Optional[dict] = None,
    ) -> R:
        """Run an async function synchronously.

        Args:
            async_fn: Async function to run
            args: Positional arguments for the function
            kwargs: Keyword arguments for the function

        Returns:
            Result of running the async function

        Raises:
            RuntimeError: If called from within an existing event loop
        """
        if kwargs is None:
            kwargs = {}

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RuntimeError(
                "Cannot use sync version from within an existing asyncio event loop. "
                "Use the async version instead."
            )

        return asyncio.run(async_fn(*args, **kwargs))


def fetch_station_table_sync(station_id: str) -> "StationTable":
    """Synchronous version of fetch_station_table.

    Examples:
        >>> table = fetch_station_table_sync("46042")
        >>> df = table.to_pandas()
    """
    from .pipeline import fetch_station_table

    return AsyncSyncBridge.run_async(fetch_station_table, args=(station_id,))


def run_batch_sync(
    station_ids: Sequence[str],
    config: Optional["ClientConfig"] = None,
    check_metadata: bool = True,
) -> "BatchResult":
    """Synchronous version of run_batch.

    Examples:
        >>> result = run_batch_sync(["42040", "46042"])
        >>> [o.path for o in result.successes]
    """
    from .pipeline import run_batch

    kwargs: Any = {"config": config, "check_metadata": check_metadata}
    return AsyncSyncBridge.run_async(run_batch, args=(list(station_ids),), kwargs=kwargs)
