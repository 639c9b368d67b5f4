"""
Command line interface: fetch NDBC realtime standard met data and save as Parquet.

Exit codes:
    0  at least one station was written (partial success is success)
    1  every station failed, or the configuration was invalid
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .config import ClientConfig
from .exceptions import ConfigError
from .models import BatchResult
from .pipeline import run_batch

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

LOGGER_NAME = "ndbc"

_configured = False


class LabeledFormatter(logging.Formatter):
    """Prefix each message with a short level label."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{label} {record.getMessage()}"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure the package logger once; later calls only adjust the level.

    The level defaults to ``NDBC_LOG_LEVEL`` or INFO.
    """
    global _configured

    level = (level or os.getenv("NDBC_LOG_LEVEL") or "INFO").upper()
    logger = logging.getLogger(LOGGER_NAME)

    if not _configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(LabeledFormatter())
        logger.addHandler(handler)
        # Keep output off the root logger
        logger.propagate = False
        _configured = True

    logger.setLevel(level)
    return logger


def reset_logging() -> None:
    """Remove handlers installed by setup_logging. Mainly for tests."""
    global _configured
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.propagate = True
    _configured = False


def _parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="ndbc-data",
        description="Fetch NDBC realtime standard meteorological data and save as Parquet",
    )
    p.add_argument(
        "stations",
        nargs="+",
        metavar="STATION",
        help="Station identifiers to retrieve (e.g., 42040, 46042, FPKA2)",
    )
    p.add_argument(
        "-o",
        "--out-dir",
        default=None,
        help="Output directory for Parquet files (default: data)",
    )
    p.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Number of stations fetched at once (default: 1)",
    )
    p.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds")
    p.add_argument(
        "--no-metadata-check",
        action="store_true",
        help="Skip the station metadata freshness check",
    )
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Warnings only")
    return p.parse_args(argv)


def _print_warnings(result: BatchResult) -> None:
    lines = [f"- {o.station_id}: {o.message}" for o in result.failures]
    if result.metadata_ok is False:
        lines.append(f"- station metadata: {result.metadata_error}")
    if lines:
        print("Warnings:", file=sys.stderr)
        for line in lines:
            print(line, file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    level = None
    if args.verbose:
        level = "DEBUG"
    elif args.quiet:
        level = "WARNING"
    logger = setup_logging(level)

    try:
        config = ClientConfig.from_env(
            out_dir=args.out_dir,
            max_concurrent=args.concurrency,
            timeout=args.timeout,
        )
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FAILURE

    result = run_batch.sync(
        args.stations, config=config, check_metadata=not args.no_metadata_check
    )
    _print_warnings(result)

    if not result.any_succeeded:
        logger.error("No station was processed successfully")
        return EXIT_FAILURE
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
