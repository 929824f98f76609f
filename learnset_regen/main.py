"""
Learnset Regen - generation learnset snapshot builder

Rebuilds the generation-restricted learnset snapshot from the full learnset
database, keeping prior entries that are still valid and adding every entry
newly tagged with the target generation.

Usage:
    python -m learnset_regen.main [--generation 7] [--force] [--check]
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from .exceptions import LearnsetRegenError
from .pipeline import RegenPaths, regenerate
from .run_config import (
    DEFAULT_DATABASE_PATH, DEFAULT_SNAPSHOT_PATH, DEFAULT_SPECIES_INDEX_PATH,
    EXPORT_NAME, LOG_DATE_FORMAT, LOG_FORMAT, TARGET_GENERATION,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Regenerate a generation learnset snapshot")
    parser.add_argument(
        "--database",
        default=DEFAULT_DATABASE_PATH,
        help="Full learnset database (JSON)"
    )
    parser.add_argument(
        "--species-index",
        default=DEFAULT_SPECIES_INDEX_PATH,
        help="Species metadata with names and dex numbers (JSON)"
    )
    parser.add_argument(
        "--snapshot",
        default=DEFAULT_SNAPSHOT_PATH,
        help="Prior snapshot to reconcile"
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Where to write the new snapshot (default: overwrite --snapshot)"
    )
    parser.add_argument(
        "--generation",
        type=int,
        choices=range(10),
        default=TARGET_GENERATION,
        help="Generation digit to restrict the snapshot to"
    )
    parser.add_argument("--export-name", default=EXPORT_NAME, help="Name of the exported mapping")
    parser.add_argument("--force", action="store_true", help="Regenerate even if the output looks up to date")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Exit 1 if the output would change, without writing it"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT
    )

    paths = RegenPaths(
        database=args.database,
        species_index=args.species_index,
        snapshot=args.snapshot,
        output=args.output,
    )

    try:
        result = regenerate(
            paths,
            generation=args.generation,
            export_name=args.export_name,
            force=args.force,
            check=args.check,
        )
    except LearnsetRegenError as e:
        logger.error(f"Regeneration failed: {e}")
        logger.debug("Traceback:", exc_info=True)
        return 1

    if result.species_count:
        logger.info(f"{result.status.value} ({result.species_count} species)")
    else:
        logger.info(result.status.value)
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
