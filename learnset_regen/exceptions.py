"""
Custom exceptions for the learnset regenerator.

Every fatal condition of a run raises one of these. The command line entry
point catches LearnsetRegenError, reports it and exits non-zero, so nothing
is ever written after one of them is raised during reconciliation.
"""


class LearnsetRegenError(Exception):
    """Base exception for the learnset regenerator."""
    pass


class MissingInputError(LearnsetRegenError):
    """A required input file (the full learnset database) does not exist."""
    pass


class StatFailureError(LearnsetRegenError):
    """
    Raised when file metadata cannot be read.

    Only used for errors other than "file not found", e.g. permission
    problems on the prior snapshot.
    """
    pass


class SnapshotParseError(LearnsetRegenError):
    """An input file exists but its contents cannot be decoded."""
    pass


class StructuralValidityError(LearnsetRegenError):
    """
    Raised when a learnset entry list is not a proper sequence.

    Aborts the whole reconciliation; identifies the species, the move and
    which dataset ("snapshot" or "database") carried the bad value.
    """

    def __init__(self, species_id: str, move_id: str, source: str, detail: str = ""):
        self.species_id = species_id
        self.move_id = move_id
        self.source = source
        message = f"{source}: learnset for {species_id}.{move_id} is malformed"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class MalformedEntryError(StructuralValidityError):
    """A learn-entry string does not follow the {generation}{method}[{level}{suffix}] grammar."""

    def __init__(self, text: str, species_id: str = "?", move_id: str = "?", source: str = "entry"):
        self.text = text
        super().__init__(species_id, move_id, source, f"bad learn entry {text!r}")


class WriteFailureError(LearnsetRegenError):
    """
    Raised when streaming the output file fails.

    The file may be left truncated; there is no rollback.
    """
    pass
