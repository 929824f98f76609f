"""
Run Configuration — constants for learnset snapshot regeneration.

Every value here can be overridden from the command line (see main.py).
"""

from pathlib import Path

# =============================================================================
# Target Generation
# =============================================================================
# Only learn entries tagged with this generation digit are merged into the
# snapshot from the full database.
TARGET_GENERATION = 7

# Name of the mapping literal written to the snapshot file:
#   exports.BattleLearnsets = { ... };
EXPORT_NAME = "BattleLearnsets"

# =============================================================================
# File Locations
# =============================================================================
DATA_DIR = Path("data")
DEFAULT_DATABASE_PATH = DATA_DIR / "learnsets.json"
DEFAULT_SPECIES_INDEX_PATH = DATA_DIR / "pokedex.json"
DEFAULT_SNAPSHOT_PATH = DATA_DIR / f"learnsets-g{TARGET_GENERATION}.js"

# =============================================================================
# Serialization
# =============================================================================
# Object keys that must be quoted in the exported literal. Digit-leading
# keys are quoted as well (see serializer.format_key).
RESERVED_KEYS = frozenset({
    "break", "case", "catch", "class", "const", "continue", "debugger",
    "default", "delete", "do", "else", "export", "extends", "finally",
    "for", "function", "if", "import", "in", "instanceof", "new",
    "return", "super", "switch", "this", "throw", "try", "typeof",
    "var", "void", "while", "with", "yield",
})

# =============================================================================
# Species Metadata
# =============================================================================
# Non-standard identifiers that legitimately have no species index entry.
SPECIAL_SPECIES_IDS = frozenset({"missingno"})
SPECIAL_SPECIES_PREFIXES = ("pokestar",)

# =============================================================================
# Logging
# =============================================================================
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def is_special_species(species_id: str) -> bool:
    """Check whether a species id is a known special-case identifier."""
    return species_id in SPECIAL_SPECIES_IDS or species_id.startswith(SPECIAL_SPECIES_PREFIXES)
