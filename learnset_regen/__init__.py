"""
Learnset snapshot regenerator.

Reconciles a generation-restricted learnset snapshot against the full,
all-generations learnset database.

Usage:
    from learnset_regen import reconcile, render_snapshot

    result = reconcile(database, prior, species_index, generation=7)
    text = render_snapshot(result.snapshot, species_index)
"""

from .data_types import (
    Diagnostic,
    DiagnosticKind,
    LearnEntry,
    ReconcileResult,
    RunResult,
    RunStatus,
)
from .exceptions import (
    LearnsetRegenError,
    MalformedEntryError,
    MissingInputError,
    SnapshotParseError,
    StatFailureError,
    StructuralValidityError,
    WriteFailureError,
)
from .learn_entry import canonicalize, format_learn_entry, is_still_valid, parse_learn_entry
from .loaders import load_database, load_snapshot, load_species_index, parse_exported_literal
from .pipeline import RegenPaths, regenerate
from .reconciler import SnapshotReconciler, reconcile
from .serializer import render_snapshot, sort_species_ids, write_snapshot
from .staleness import needs_regeneration

__version__ = "1.0.0"

__all__ = [
    "LearnEntry",
    "parse_learn_entry",
    "format_learn_entry",
    "canonicalize",
    "is_still_valid",
    "reconcile",
    "render_snapshot",
    "write_snapshot",
    "regenerate",
    "RegenPaths",
    "needs_regeneration",
    "LearnsetRegenError",
]
