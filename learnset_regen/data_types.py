"""
Learnset Data Types.

Data structures shared by the reconciler, the serializer and the pipeline:
parsed learn entries, diagnostics emitted while reconciling, and run results.

A learnset is a plain mapping of move id -> list of learn-entry strings.
Both the full database and snapshots are stored as
    {species_id: {"learnset": {move_id: ["7L005", "7M", ...]}}}
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

Learnset = Dict[str, List[str]]
LearnsetTable = Dict[str, Dict[str, Learnset]]
SpeciesIndex = Dict[str, dict]

LEVEL_UP = "L"


@dataclass(frozen=True)
class LearnEntry:
    """
    A parsed learn entry.

    Attributes:
        generation: Generation digit (0-9)
        method: Single uppercase method letter (L=level-up, M=machine,
            T=tutor, E=egg, S=event, ...)
        level: Level for level-up entries, None otherwise
        suffix: Level-up disambiguation suffix, or for other methods the
            raw remainder of the string (e.g. the event index of "7S0")
    """

    generation: int
    method: str
    level: Optional[int] = None
    suffix: str = ""

    @property
    def is_level_up(self) -> bool:
        return self.method == LEVEL_UP

    @property
    def canonical(self) -> str:
        if self.is_level_up:
            return f"{self.generation}{self.method}{self.level:03d}{self.suffix}"
        return f"{self.generation}{self.method}{self.suffix}"


class DiagnosticKind(Enum):
    """Kinds of non-fatal diagnostics produced during reconciliation."""

    NEW_ENTRY = "new entry"
    REMOVED_ENTRY = "removed entry"
    MISSING_METADATA = "missing metadata"


@dataclass
class Diagnostic:
    kind: DiagnosticKind
    species_id: str
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value.upper()}: {self.message}"


@dataclass
class ReconcileResult:
    """New snapshot plus the diagnostics collected while building it."""

    snapshot: LearnsetTable = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def _of_kind(self, kind: DiagnosticKind) -> List[str]:
        return [d.species_id for d in self.diagnostics if d.kind == kind]

    @property
    def new_entries(self) -> List[str]:
        return self._of_kind(DiagnosticKind.NEW_ENTRY)

    @property
    def removed_entries(self) -> List[str]:
        return self._of_kind(DiagnosticKind.REMOVED_ENTRY)

    @property
    def missing_metadata(self) -> List[str]:
        return self._of_kind(DiagnosticKind.MISSING_METADATA)


class RunStatus(Enum):
    """Terminal outcome of one regeneration run."""

    DONE = "DONE"            # snapshot regenerated and written
    CACHED = "CACHED"        # output newer than every input, nothing done
    UNCHANGED = "UNCHANGED"  # check mode: output already up to date
    CHANGED = "CHANGED"      # check mode: output would change


@dataclass
class RunResult:
    status: RunStatus
    diagnostics: List[Diagnostic] = field(default_factory=list)
    species_count: int = 0

    @property
    def ok(self) -> bool:
        return self.status != RunStatus.CHANGED
