"""
Output directory bookkeeping and Parquet persistence.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

import pyarrow as pa
import pyarrow.parquet as pq

from .exceptions import WriteError
from .table import StationTable

logger = logging.getLogger(__name__)

PARQUET_SUFFIX = ".parquet"


def ensure_data_dir(
    out_dir: Union[str, Path], gitignore: Union[str, Path] = ".gitignore"
) -> Path:
    """
    Create the output directory and make sure it is listed in the ignore file.

    The rule is the directory path relative to the ignore file's parent,
    anchored with a leading ``/``. It is appended only when not already
    present, so repeated calls leave the ignore file unchanged. A directory
    outside the ignore file's tree gets no rule.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    gitignore = Path(gitignore)
    rule = _ignore_rule(out_dir, gitignore)
    if rule is None:
        logger.debug(f"{out_dir} is outside {gitignore.parent}, no ignore rule added")
        return out_dir

    if gitignore.exists():
        text = gitignore.read_text(encoding="utf-8")
        if rule not in text.splitlines():
            if text and not text.endswith("\n"):
                text += "\n"
            gitignore.write_text(text + rule + "\n", encoding="utf-8")
            logger.debug(f"Added {rule} to {gitignore}")
    else:
        gitignore.write_text(rule + "\n", encoding="utf-8")
        logger.debug(f"Created {gitignore} with {rule}")
    return out_dir


def _ignore_rule(out_dir: Path, gitignore: Path) -> Optional[str]:
    base = gitignore.resolve().parent
    try:
        relative = out_dir.resolve().relative_to(base)
    except ValueError:
        return None
    if relative == Path("."):
        return None
    return f"/{relative.as_posix()}"


def station_path(out_dir: Union[str, Path], station_id: str) -> Path:
    return Path(out_dir) / f"{station_id}{PARQUET_SUFFIX}"


def write_station_table(
    table: StationTable, out_dir: Union[str, Path], station_id: str
) -> Path:
    """
    Write a station table to ``<out_dir>/<station_id>.parquet``.

    The file is written to a temporary name and then moved into place, so a
    failed write never leaves a partial file at the target path.

    Raises:
        WriteError: If the file cannot be written
    """
    out_path = station_path(out_dir, station_id)
    tmp_path = out_path.parent / f"{out_path.name}.tmp.{os.getpid()}"

    try:
        pq.write_table(table.to_arrow(), tmp_path)
        os.replace(tmp_path, out_path)
    except (OSError, pa.ArrowException) as e:
        try:
            tmp_path.unlink()
        except OSError:
            pass
        raise WriteError(f"Failed to write {out_path}: {e}") from e

    logger.info(
        f"{station_id}: wrote {out_path} ({table.num_rows} rows, {table.num_columns} columns)"
    )
    return out_path
