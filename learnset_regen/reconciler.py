"""
Snapshot Reconciler.

Rebuilds a generation-restricted learnset snapshot from:
- the full learnset database (all generations, authoritative), and
- the previously generated snapshot.

Entries of the prior snapshot that are no longer backed by the database are
dropped, the ones still backed are carried forward unchanged (apart from
level padding), and every database entry tagged with the target generation
that is not yet present is appended. The new snapshot is always built from
scratch; neither input is mutated.
"""

import logging
from collections.abc import Mapping
from typing import List, Optional, Sequence

from .data_types import (
    Diagnostic, DiagnosticKind, Learnset, LearnsetTable, ReconcileResult, SpeciesIndex,
)
from .exceptions import MalformedEntryError, StructuralValidityError
from .learn_entry import matches_any, parse_learn_entry, unique_canonical
from .run_config import TARGET_GENERATION, is_special_species

logger = logging.getLogger(__name__)


def dex_number(species_id: str, species_index: SpeciesIndex) -> int:
    """Numeric dex index of a species; 0 when the index has no entry for it."""
    record = species_index.get(species_id) or {}
    try:
        return int(record.get("num", 0))
    except (TypeError, ValueError):
        return 0


def display_name(species_id: str, species_index: SpeciesIndex) -> str:
    record = species_index.get(species_id) or {}
    return record.get("name") or record.get("species") or species_id


def _learnset_of(record) -> Optional[Mapping]:
    if isinstance(record, Mapping):
        return record.get("learnset")
    return None


def _require_sequence(value, species_id: str, move_id: str, source: str) -> Sequence:
    if isinstance(value, (list, tuple)):
        return value
    raise StructuralValidityError(
        species_id, move_id, source, f"expected a list, got {type(value).__name__}"
    )


def _add_context(exc: MalformedEntryError, species_id: str, move_id: str, source: str):
    return MalformedEntryError(exc.text, species_id, move_id, source)


class SnapshotReconciler:
    """
    Reconciles one prior snapshot against one full database.

    Usage:
        result = SnapshotReconciler(database, prior, species_index).run()
        result.snapshot      # {species_id: {"learnset": {...}}}
        result.diagnostics   # new / removed / missing-metadata lines
    """

    def __init__(
        self,
        database: LearnsetTable,
        prior: LearnsetTable,
        species_index: Optional[SpeciesIndex] = None,
        generation: int = TARGET_GENERATION,
    ):
        self.database = database
        self.prior = prior
        self.species_index = species_index or {}
        self.generation = int(generation)
        self.diagnostics: List[Diagnostic] = []

    def run(self) -> ReconcileResult:
        pending = self._collect_pending()
        snapshot: LearnsetTable = {}

        for species_id, prior_learnset in pending.items():
            if species_id not in self.database:
                self._emit(DiagnosticKind.REMOVED_ENTRY, species_id,
                           f"{display_name(species_id, self.species_index)} "
                           f"no longer exists in the learnset database")
                continue
            full_learnset = _learnset_of(self.database[species_id]) or {}
            snapshot[species_id] = {
                "learnset": self._reconcile_species(species_id, prior_learnset, full_learnset)
            }

        return ReconcileResult(snapshot=snapshot, diagnostics=list(self.diagnostics))

    def _emit(self, kind: DiagnosticKind, species_id: str, message: str):
        self.diagnostics.append(Diagnostic(kind=kind, species_id=species_id, message=message))

    def _collect_pending(self) -> dict:
        """
        Prior learnsets keyed by species, in prior snapshot order, followed
        by an empty learnset for every database species the snapshot lacks.
        """
        pending = {}
        for species_id, record in self.prior.items():
            pending[species_id] = _learnset_of(record)

        for species_id in self.database:
            if pending.get(species_id) is not None:
                continue
            pending[species_id] = {}
            self._emit(DiagnosticKind.NEW_ENTRY, species_id,
                       f"{display_name(species_id, self.species_index)} added to the snapshot")
            if species_id not in self.species_index and not is_special_species(species_id):
                self._emit(DiagnosticKind.MISSING_METADATA, species_id,
                           f"{species_id} has learnset data but no species index entry")

        # Prior records without a learnset and unknown to the database are
        # still listed so the removal check reports them
        return {sid: (ls if ls is not None else {}) for sid, ls in pending.items()}

    def _reconcile_species(self, species_id: str, prior_learnset: Mapping, full_learnset: Mapping) -> Learnset:
        if not isinstance(prior_learnset, Mapping):
            raise StructuralValidityError(species_id, "*", "snapshot", "learnset is not a mapping")
        if not isinstance(full_learnset, Mapping):
            raise StructuralValidityError(species_id, "*", "database", "learnset is not a mapping")

        learnset: Learnset = {}

        # Carry forward prior entries still backed by the database
        for move_id, sources in prior_learnset.items():
            sources = _require_sequence(sources, species_id, move_id, "snapshot")
            targets = full_learnset.get(move_id)
            targets = _require_sequence(targets, species_id, move_id, "database") if targets is not None else []
            try:
                target_entries = [parse_learn_entry(t) for t in targets]
            except MalformedEntryError as e:
                raise _add_context(e, species_id, move_id, "database") from e

            kept = []
            for text in sources:
                try:
                    entry = parse_learn_entry(text)
                except MalformedEntryError as e:
                    raise _add_context(e, species_id, move_id, "snapshot") from e
                # Same rule as is_still_valid, on pre-parsed targets
                if matches_any(entry, target_entries):
                    kept.append(text)
            learnset[move_id] = kept

        # Merge in target-generation entries from the database
        for move_id, sources in full_learnset.items():
            sources = _require_sequence(sources, species_id, move_id, "database")
            try:
                kept = unique_canonical(learnset.get(move_id, []))
                kept_entries = [parse_learn_entry(k) for k in kept]
                for text in sources:
                    entry = parse_learn_entry(text)
                    if entry.generation != self.generation:
                        continue
                    if matches_any(entry, kept_entries):
                        continue
                    kept.append(entry.canonical)
                    kept_entries.append(entry)
            except MalformedEntryError as e:
                raise _add_context(e, species_id, move_id, "database") from e
            learnset[move_id] = sorted(kept)

        return learnset


def reconcile(
    database: LearnsetTable,
    prior: LearnsetTable,
    species_index: Optional[SpeciesIndex] = None,
    generation: int = TARGET_GENERATION,
) -> ReconcileResult:
    """
    Build a new generation snapshot from the full database and the prior snapshot.

    Args:
        database: Full learnset database, {species_id: {"learnset": {...}}}
        prior: Previously generated snapshot, same shape
        species_index: Species metadata ({species_id: {"name", "num"}}),
            used for diagnostics only
        generation: Generation digit whose entries are merged in

    Returns:
        ReconcileResult with the new snapshot and its diagnostics

    Raises:
        StructuralValidityError: a learnset entry list is not a list, or an
            entry does not follow the learn-entry grammar
    """
    result = SnapshotReconciler(database, prior, species_index, generation).run()
    logger.debug(
        f"Reconciled {len(result.snapshot)} species "
        f"({len(result.new_entries)} new, {len(result.removed_entries)} removed)"
    )
    return result
