"""Tests for learn entry parsing, formatting and matching."""

import pytest
from learnset_regen.data_types import LearnEntry
from learnset_regen.exceptions import MalformedEntryError, StructuralValidityError
from learnset_regen.learn_entry import (
    canonicalize, format_learn_entry, is_still_valid, parse_learn_entry, unique_canonical,
)


class TestParse:
    def test_level_up(self):
        entry = parse_learn_entry("7L005")
        assert entry.generation == 7
        assert entry.method == "L"
        assert entry.level == 5
        assert entry.suffix == ""
        assert entry.is_level_up

    def test_unpadded_level(self):
        assert parse_learn_entry("7L9").level == 9

    def test_level_with_suffix(self):
        entry = parse_learn_entry("7L005q")
        assert entry.level == 5
        assert entry.suffix == "q"

    def test_machine(self):
        entry = parse_learn_entry("6M")
        assert entry == LearnEntry(generation=6, method="M")
        assert not entry.is_level_up
        assert entry.level is None

    def test_event_keeps_index(self):
        entry = parse_learn_entry("7S0")
        assert entry.method == "S"
        assert entry.suffix == "0"

    @pytest.mark.parametrize("text", ["", "L005", "7", "7l005", "77L", "7L", "7Lq"])
    def test_malformed(self, text):
        with pytest.raises(MalformedEntryError):
            parse_learn_entry(text)

    def test_non_string(self):
        with pytest.raises(MalformedEntryError):
            parse_learn_entry(7)

    def test_malformed_is_structural(self):
        with pytest.raises(StructuralValidityError):
            parse_learn_entry("x")


class TestFormat:
    def test_pads_level(self):
        assert canonicalize("7L9") == "7L009"
        assert canonicalize("7L45") == "7L045"
        assert canonicalize("7L100") == "7L100"

    def test_keeps_suffix(self):
        assert canonicalize("7L5a") == "7L005a"

    def test_non_level_unchanged(self):
        for text in ("7M", "7T", "6E", "7S12", "7V"):
            assert canonicalize(text) == text

    def test_format_record(self):
        entry = LearnEntry(generation=7, method="L", level=1, suffix="")
        assert format_learn_entry(entry) == "7L001"

    def test_padded_sort_matches_level_order(self):
        entries = [canonicalize(t) for t in ("7L50", "7L9", "7L100", "7L10")]
        assert sorted(entries) == ["7L009", "7L010", "7L050", "7L100"]

    def test_unique_canonical(self):
        assert unique_canonical(["7L9", "7L009", "7M", "7M"]) == ["7L009", "7M"]


class TestIsStillValid:
    def test_exact_non_level(self):
        assert is_still_valid("7M", ["7M", "6M"])
        assert not is_still_valid("7T", ["7M"])

    def test_non_level_needs_exact_string(self):
        assert not is_still_valid("7S1", ["7S0"])

    def test_level_padding_equivalence(self):
        assert is_still_valid("7L9", ["7L009"])
        assert is_still_valid("7L009", ["7L9"])

    def test_level_suffix_ignored(self):
        assert is_still_valid("7L005q", ["7L005"])
        assert is_still_valid("7L005", ["7L005q"])

    def test_level_mismatch(self):
        assert not is_still_valid("7L005", ["7L006", "7M"])

    def test_level_ignores_generation(self):
        assert is_still_valid("7L009", ["6L009"])

    def test_empty_targets(self):
        assert not is_still_valid("7L005", [])
        assert not is_still_valid("7M", [])
