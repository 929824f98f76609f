"""
Snapshot Serializer.

Writes a snapshot as a single exported mapping literal, one species per line:

    exports.BattleLearnsets = {
    	bulbasaur: {learnset: {growl: ["7L003"], tackle: ["7L001"]}},
    	ivysaur: {learnset: {"return": ["7M"]}}
    };

Downstream code loads this file as code, so the shape is exact: species in
dex order, moves alphabetical, reserved or digit-leading keys quoted, entry
lists as compact JSON arrays and a trailing newline.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, List

from .data_types import LearnsetTable, SpeciesIndex
from .exceptions import WriteFailureError
from .reconciler import dex_number
from .run_config import EXPORT_NAME, RESERVED_KEYS

logger = logging.getLogger(__name__)


def format_key(identifier: str) -> str:
    """Emit an object key, quoting it when it would not be a valid bare key."""
    if identifier in RESERVED_KEYS or identifier[:1].isdigit():
        return json.dumps(identifier)
    return identifier


def format_entries(entries: Iterable[str]) -> str:
    return json.dumps(list(entries), separators=(",", ":"))


def sort_species_ids(species_ids: Iterable[str], species_index: SpeciesIndex) -> List[str]:
    """
    Order species for output.

    Non-positive dex numbers (special forms, test entries) come first in
    descending order, then positive numbers ascending. Equal numbers fall
    back to the identifier.
    """
    def sort_key(species_id: str):
        num = dex_number(species_id, species_index)
        if num <= 0:
            return (0, -num, species_id)
        return (1, num, species_id)

    return sorted(species_ids, key=sort_key)


def format_species_line(species_id: str, learnset) -> str:
    moves = ", ".join(
        f"{format_key(move_id)}: {format_entries(learnset[move_id])}"
        for move_id in sorted(learnset)
    )
    return f"\t{format_key(species_id)}: {{learnset: {{{moves}}}}}"


def iter_snapshot_lines(
    snapshot: LearnsetTable,
    species_index: SpeciesIndex,
    export_name: str = EXPORT_NAME,
) -> Iterator[str]:
    """Yield the output text piece by piece, each piece ending in a newline."""
    yield f"exports.{export_name} = {{\n"
    species_ids = sort_species_ids(snapshot, species_index)
    for i, species_id in enumerate(species_ids):
        separator = "," if i < len(species_ids) - 1 else ""
        learnset = snapshot[species_id].get("learnset") or {}
        yield format_species_line(species_id, learnset) + separator + "\n"
    yield "};\n"


def render_snapshot(
    snapshot: LearnsetTable,
    species_index: SpeciesIndex,
    export_name: str = EXPORT_NAME,
) -> str:
    return "".join(iter_snapshot_lines(snapshot, species_index, export_name))


def write_snapshot(
    path: Path,
    snapshot: LearnsetTable,
    species_index: SpeciesIndex,
    export_name: str = EXPORT_NAME,
) -> None:
    """
    Stream a finished snapshot to disk.

    Only called once the snapshot is fully computed. The handle is closed on
    both success and failure; a failure part-way through may leave a
    truncated file behind.

    Raises:
        WriteFailureError: if the file cannot be opened or written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="\n") as f:
            for chunk in iter_snapshot_lines(snapshot, species_index, export_name):
                f.write(chunk)
    except OSError as e:
        raise WriteFailureError(f"Failed writing snapshot to {path}: {e}") from e
    logger.debug(f"Wrote {len(snapshot)} species to {path}")
