"""
Staleness Gate.

Decides whether the snapshot needs regenerating by comparing modification
times. The decision itself is a pure function of four timestamps so it can
be tested without touching the filesystem.
"""

import logging
from pathlib import Path
from typing import Optional

from .exceptions import MissingInputError, StatFailureError

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent


def needs_regeneration(
    output_mtime: Optional[float],
    script_mtime: Optional[float],
    database_mtime: Optional[float],
    snapshot_mtime: Optional[float],
) -> bool:
    """
    Check whether the output is stale.

    Args:
        output_mtime: Output file mtime, None if it does not exist
        script_mtime: Generator code mtime, None if unknown
        database_mtime: Full database mtime
        snapshot_mtime: Prior snapshot mtime, None if it does not exist

    Returns:
        False only if the output and prior snapshot exist and the output is
        not older than any of the inputs.
    """
    if output_mtime is None or snapshot_mtime is None:
        return True
    return any(
        mtime is not None and mtime > output_mtime
        for mtime in (script_mtime, database_mtime, snapshot_mtime)
    )


def read_mtime(path: Path, required: bool = False) -> Optional[float]:
    """
    Read a file's modification time.

    Returns None for a missing file unless it is required.

    Raises:
        MissingInputError: required file does not exist
        StatFailureError: metadata unreadable for any other reason
    """
    try:
        return path.stat().st_mtime
    except FileNotFoundError as e:
        if required:
            raise MissingInputError(f"Required input not found: {path}") from e
        return None
    except OSError as e:
        raise StatFailureError(f"Cannot stat {path}: {e}") from e


def script_mtime(package_dir: Path = PACKAGE_DIR) -> Optional[float]:
    """Newest mtime among the generator's own modules."""
    mtimes = [read_mtime(p) for p in package_dir.glob("*.py")]
    mtimes = [m for m in mtimes if m is not None]
    return max(mtimes) if mtimes else None


def check_staleness(database: Path, snapshot: Path, output: Path) -> bool:
    """
    Stat all inputs and decide whether to run.

    Raises:
        MissingInputError: the full database does not exist
        StatFailureError: an input or the output could not be stat'ed
    """
    # Database first: a missing database wins over any other stat error
    database_mtime = read_mtime(Path(database), required=True)
    snapshot_mtime = read_mtime(Path(snapshot))
    output_mtime = read_mtime(Path(output))

    stale = needs_regeneration(
        output_mtime=output_mtime,
        script_mtime=script_mtime(),
        database_mtime=database_mtime,
        snapshot_mtime=snapshot_mtime,
    )
    if stale:
        logger.info(f"{output} is out of date, will run")
    else:
        logger.info(f"{output} is up to date, cached")
    return stale
