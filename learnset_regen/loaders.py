"""
Input loaders.

- Full learnset database: JSON, {species_id: {"learnset": {move_id: [...]}}}
- Species index: JSON, {species_id: {"name": "Bulbasaur", "num": 1}}
- Prior snapshot: an exported object literal (as written by serializer.py,
  or hand-edited JS with a prologue, trailing commas or single quotes), or JSON
"""

import json
import logging
import re
from pathlib import Path
from typing import Tuple

from .data_types import LearnsetTable, SpeciesIndex
from .exceptions import MissingInputError, SnapshotParseError

logger = logging.getLogger(__name__)

# Leading statements or comments (e.g. a "use strict" prologue) are skipped
_EXPORT_RE = re.compile(
    r"(?:^|[;\s])(?:module\.)?exports\.(?P<name>[A-Za-z_$][\w$]*)\s*=\s*(?P<body>\{.*\})\s*;?\s*$",
    re.S,
)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as e:
        raise SnapshotParseError(f"Cannot read {path}: {e}") from e


def _decode_json(text: str, path) -> object:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotParseError(f"Failed to parse {path}: {e}") from e


def _require_table(data, path) -> dict:
    if not isinstance(data, dict):
        raise SnapshotParseError(f"{path} must hold an object keyed by species id")
    for species_id, record in data.items():
        if not isinstance(record, dict):
            raise SnapshotParseError(f"{path}: entry for {species_id!r} is not an object")
    return data


def _string_to_json(body: str, i: int) -> Tuple[str, int]:
    """
    Read the string literal starting at body[i].

    Returns its JSON (double-quoted) form and the index after the closing quote.
    """
    quote = body[i]
    n = len(body)
    j = i + 1
    chunks = []
    while j < n and body[j] != quote:
        step = 2 if body[j] == "\\" else 1
        chunk = body[j:j + step]
        if quote == "'":
            if chunk == "\\'":
                chunk = "'"
            elif chunk == '"':
                chunk = '\\"'
        chunks.append(chunk)
        j += step
    if j >= n:
        raise SnapshotParseError("unterminated string literal")
    return '"' + "".join(chunks) + '"', j + 1


def literal_to_json(body: str) -> str:
    """
    Turn an object literal into JSON text.

    Outside string literals, identifiers followed by ':' get double quotes
    and trailing commas before '}' or ']' are dropped. Single-quoted strings
    become double-quoted ones.
    """
    out = []
    i = 0
    n = len(body)
    while i < n:
        ch = body[i]
        if ch in "\"'":
            text, i = _string_to_json(body, i)
            out.append(text)
            continue
        if ch == ",":
            k = i + 1
            while k < n and body[k].isspace():
                k += 1
            if k < n and body[k] in "}]":
                i += 1
                continue
        if ch.isalpha() or ch in "_$":
            j = i + 1
            while j < n and (body[j].isalnum() or body[j] in "_$"):
                j += 1
            k = j
            while k < n and body[k].isspace():
                k += 1
            word = body[i:j]
            out.append(f'"{word}"' if k < n and body[k] == ":" else word)
            i = j
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def parse_exported_literal(text: str, source="<snapshot>") -> Tuple[str, dict]:
    """
    Parse `exports.Name = {...};` into (Name, mapping).

    Anything before the export statement is ignored.

    Raises:
        SnapshotParseError: if the text is not a single exported object literal
    """
    match = _EXPORT_RE.search(text)
    if not match:
        raise SnapshotParseError(f"{source} does not export a mapping literal")
    try:
        json_text = literal_to_json(match.group("body"))
    except SnapshotParseError as e:
        raise SnapshotParseError(f"{source}: {e}") from e
    data = _decode_json(json_text, source)
    return match.group("name"), data


def load_database(path: Path) -> LearnsetTable:
    """
    Load the full learnset database.

    Raises:
        MissingInputError: the file does not exist
        SnapshotParseError: the file is not a valid database
    """
    path = Path(path)
    try:
        text = _read_text(path)
    except FileNotFoundError as e:
        raise MissingInputError(f"Learnset database not found: {path}") from e
    database = _require_table(_decode_json(text, path), path)
    logger.debug(f"Loaded {len(database)} species from {path}")
    return database


def load_species_index(path: Path) -> SpeciesIndex:
    """Load species metadata; a missing file yields an empty index."""
    path = Path(path)
    try:
        text = _read_text(path)
    except FileNotFoundError:
        logger.warning(f"Species index not found: {path} (diagnostics and ordering will use ids only)")
        return {}
    return _require_table(_decode_json(text, path), path)


def load_snapshot(path: Path) -> LearnsetTable:
    """Load a prior snapshot; a missing file means it was never generated."""
    path = Path(path)
    try:
        text = _read_text(path)
    except FileNotFoundError:
        logger.info(f"No prior snapshot at {path}, starting from an empty one")
        return {}

    if path.suffix == ".json":
        data = _decode_json(text, path)
    else:
        _, data = parse_exported_literal(text, path)
    return _require_table(data, path)
