"""
Regeneration pipeline.

Staleness Gate -> load inputs -> reconcile -> serialize -> write.
The output file is opened only after the whole snapshot is in memory.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .data_types import Diagnostic, DiagnosticKind, RunResult, RunStatus
from .exceptions import StatFailureError
from .loaders import load_database, load_snapshot, load_species_index
from .reconciler import reconcile
from .run_config import (
    DEFAULT_DATABASE_PATH, DEFAULT_SNAPSHOT_PATH, DEFAULT_SPECIES_INDEX_PATH,
    EXPORT_NAME, TARGET_GENERATION,
)
from .serializer import render_snapshot, write_snapshot
from .staleness import check_staleness

logger = logging.getLogger(__name__)


@dataclass
class RegenPaths:
    """File locations for one run. The output defaults to the prior snapshot."""

    database: Path = DEFAULT_DATABASE_PATH
    species_index: Path = DEFAULT_SPECIES_INDEX_PATH
    snapshot: Path = DEFAULT_SNAPSHOT_PATH
    output: Optional[Path] = None

    def __post_init__(self):
        self.database = Path(self.database)
        self.species_index = Path(self.species_index)
        self.snapshot = Path(self.snapshot)
        self.output = Path(self.output) if self.output is not None else self.snapshot


def log_diagnostics(diagnostics: List[Diagnostic]):
    for d in diagnostics:
        if d.kind == DiagnosticKind.MISSING_METADATA:
            logger.warning(str(d))
        else:
            logger.info(str(d))


def regenerate(
    paths: RegenPaths,
    generation: int = TARGET_GENERATION,
    export_name: str = EXPORT_NAME,
    force: bool = False,
    check: bool = False,
) -> RunResult:
    """
    Regenerate the generation snapshot.

    Args:
        paths: Input and output locations
        generation: Generation digit to restrict the snapshot to
        export_name: Name of the exported mapping literal
        force: Skip the staleness check
        check: Compare against the existing output instead of writing

    Returns:
        RunResult with status DONE or CACHED (UNCHANGED or CHANGED in check mode)

    Raises:
        LearnsetRegenError: any fatal condition; nothing is written
    """
    if not (force or check) and not check_staleness(paths.database, paths.snapshot, paths.output):
        return RunResult(status=RunStatus.CACHED)

    database = load_database(paths.database)
    species_index = load_species_index(paths.species_index)
    prior = load_snapshot(paths.snapshot)

    result = reconcile(database, prior, species_index, generation)
    log_diagnostics(result.diagnostics)

    if check:
        rendered = render_snapshot(result.snapshot, species_index, export_name)
        try:
            current = paths.output.read_text(encoding="utf-8")
        except FileNotFoundError:
            current = None
        except OSError as e:
            raise StatFailureError(f"Cannot read {paths.output}: {e}") from e
        status = RunStatus.UNCHANGED if current == rendered else RunStatus.CHANGED
        logger.info(f"{paths.output}: {status.value}")
    else:
        write_snapshot(paths.output, result.snapshot, species_index, export_name)
        status = RunStatus.DONE

    return RunResult(
        status=status,
        diagnostics=result.diagnostics,
        species_count=len(result.snapshot),
    )
