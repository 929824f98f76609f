"""
Learn entry encoding.

A learn entry is a short string describing how a species learns a move:

    {generation}{method}[{level}{suffix}]

    "7L005"   generation 7, level-up at level 5
    "7L5"     same entry, unpadded
    "7L005a"  level 5 with a disambiguation suffix
    "6M"      generation 6, TM/HM
    "7S0"     generation 7, event #0

Canonical form zero-pads level-up levels to 3 digits so that plain string
sorting matches numeric level order.
"""

import re
from typing import Iterable, List, Sequence

from .data_types import LearnEntry
from .exceptions import MalformedEntryError

_ENTRY_RE = re.compile(r"^(\d)([A-Z])(.*)$", re.S)
_LEVEL_RE = re.compile(r"^(\d+)(.*)$", re.S)


def parse_learn_entry(text: str) -> LearnEntry:
    """
    Parse a learn-entry string into its parts.

    Raises:
        MalformedEntryError: if the text is not a string following the
            entry grammar, or a level-up entry carries no level.
    """
    if not isinstance(text, str):
        raise MalformedEntryError(repr(text))
    match = _ENTRY_RE.match(text)
    if not match:
        raise MalformedEntryError(text)
    generation, method, rest = match.groups()

    if method != "L":
        return LearnEntry(generation=int(generation), method=method, suffix=rest)

    level_match = _LEVEL_RE.match(rest)
    if not level_match:
        raise MalformedEntryError(text)
    level, suffix = level_match.groups()
    return LearnEntry(generation=int(generation), method=method, level=int(level), suffix=suffix)


def format_learn_entry(entry: LearnEntry) -> str:
    """Format a parsed entry in canonical form."""
    return entry.canonical


def canonicalize(text: str) -> str:
    """Re-format a learn-entry string in canonical form ("7L9" -> "7L009")."""
    return format_learn_entry(parse_learn_entry(text))


def _same_level(entry: LearnEntry, other: LearnEntry) -> bool:
    # Suffix and generation do not take part in the comparison
    return other.method == entry.method and other.level == entry.level


def matches_any(entry: LearnEntry, candidates: Iterable[LearnEntry]) -> bool:
    """
    Level-up entries match on (method, level); everything else needs the
    exact same canonical string.
    """
    if entry.is_level_up:
        return any(_same_level(entry, c) for c in candidates)
    return any(entry.canonical == c.canonical for c in candidates)


def is_still_valid(candidate: str, targets: Sequence[str]) -> bool:
    """
    Check whether a learn entry is still backed by a list of entries.

    Non level-up entries require exact string membership. Level-up entries
    only need an entry with the same method letter and the same numeric
    level; the disambiguation suffix is ignored, so "7L005q" is still valid
    against ["7L005"] and "7L9" against ["7L009"].

    Args:
        candidate: Entry to validate
        targets: Authoritative entries for the same species and move

    Returns:
        True if the candidate should be kept.
    """
    entry = parse_learn_entry(candidate)
    if not entry.is_level_up:
        return candidate in targets
    return any(_same_level(entry, parse_learn_entry(t)) for t in targets)


def unique_canonical(entries: Iterable[str]) -> List[str]:
    """Canonicalize entries, dropping repeats while keeping first-seen order."""
    seen = {}
    for text in entries:
        seen.setdefault(canonicalize(text), None)
    return list(seen)
