"""End-to-end tests for the regeneration pipeline and command line."""

import json
import os

import pytest
from learnset_regen.data_types import RunStatus
from learnset_regen.exceptions import MissingInputError, StructuralValidityError
from learnset_regen.main import main
from learnset_regen.pipeline import RegenPaths, regenerate


DATABASE = {
    "bulbasaur": {"learnset": {"tackle": ["6L001", "7L1"], "growl": ["7L3"], "return": ["7M"]}},
    "ivysaur": {"learnset": {"tackle": ["7L001"]}},
    "pokestarufo": {"learnset": {"bubble": ["5L001"]}},
}

SPECIES_INDEX = {
    "bulbasaur": {"name": "Bulbasaur", "num": 1},
    "ivysaur": {"name": "Ivysaur", "num": 2},
    "pokestarufo": {"name": "Pokestar UFO", "num": -5000},
}


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "learnsets.json").write_text(json.dumps(DATABASE), encoding="utf-8")
    (tmp_path / "pokedex.json").write_text(json.dumps(SPECIES_INDEX), encoding="utf-8")
    (tmp_path / "learnsets-g7.js").write_text(
        "exports.BattleLearnsets = {\n"
        '\tbulbasaur: {learnset: {tackle: ["7L001q", "7L050"]}},\n'
        '\toldmon: {learnset: {tackle: ["7L001"]}}\n'
        "};\n",
        encoding="utf-8",
    )
    # Older than the database, so the first run is never cached
    os.utime(tmp_path / "learnsets-g7.js", (1000, 1000))
    return tmp_path


def make_paths(data_dir, **overrides):
    paths = dict(
        database=data_dir / "learnsets.json",
        species_index=data_dir / "pokedex.json",
        snapshot=data_dir / "learnsets-g7.js",
    )
    paths.update(overrides)
    return RegenPaths(**paths)


class TestRegenerate:
    def test_regenerates_in_place(self, data_dir):
        result = regenerate(make_paths(data_dir), generation=7)

        assert result.status == RunStatus.DONE
        assert result.species_count == 3
        assert (data_dir / "learnsets-g7.js").read_text(encoding="utf-8") == (
            "exports.BattleLearnsets = {\n"
            "\tpokestarufo: {learnset: {bubble: []}},\n"
            '\tbulbasaur: {learnset: {growl: ["7L003"], "return": ["7M"], tackle: ["7L001q"]}},\n'
            '\tivysaur: {learnset: {tackle: ["7L001"]}}\n'
            "};\n"
        )

    def test_diagnostics(self, data_dir):
        result = regenerate(make_paths(data_dir), generation=7)
        kinds = [(d.kind.name, d.species_id) for d in result.diagnostics]
        assert ("REMOVED_ENTRY", "oldmon") in kinds
        assert ("NEW_ENTRY", "ivysaur") in kinds
        assert ("NEW_ENTRY", "pokestarufo") in kinds
        assert all(kind != "MISSING_METADATA" for kind, _ in kinds)

    def test_second_run_is_byte_identical(self, data_dir):
        snapshot = data_dir / "learnsets-g7.js"
        regenerate(make_paths(data_dir), generation=7)
        first = snapshot.read_text(encoding="utf-8")
        result = regenerate(make_paths(data_dir), generation=7, force=True)
        assert snapshot.read_text(encoding="utf-8") == first
        assert result.diagnostics == []

    def test_cached_when_up_to_date(self, data_dir):
        output = data_dir / "out.js"
        regenerate(make_paths(data_dir, output=output), generation=7)
        result = regenerate(make_paths(data_dir, output=output), generation=7)
        assert result.status == RunStatus.CACHED

    def test_separate_output_leaves_snapshot(self, data_dir):
        snapshot = data_dir / "learnsets-g7.js"
        before = snapshot.read_text(encoding="utf-8")
        regenerate(make_paths(data_dir, output=data_dir / "out.js"), generation=7)
        assert snapshot.read_text(encoding="utf-8") == before
        assert (data_dir / "out.js").exists()

    def test_missing_database_leaves_output_untouched(self, data_dir):
        snapshot = data_dir / "learnsets-g7.js"
        os.utime(snapshot, (1000, 1000))
        before = snapshot.read_text(encoding="utf-8")
        with pytest.raises(MissingInputError):
            regenerate(make_paths(data_dir, database=data_dir / "nope.json"), generation=7)
        assert snapshot.read_text(encoding="utf-8") == before
        assert snapshot.stat().st_mtime == 1000

    def test_structural_error_writes_nothing(self, data_dir):
        (data_dir / "learnsets.json").write_text(
            json.dumps({"bulbasaur": {"learnset": {"tackle": "7L001"}}}), encoding="utf-8"
        )
        output = data_dir / "out.js"
        with pytest.raises(StructuralValidityError):
            regenerate(make_paths(data_dir, output=output), generation=7, force=True)
        assert not output.exists()

    def test_check_mode(self, data_dir):
        paths = make_paths(data_dir)
        before = (data_dir / "learnsets-g7.js").read_text(encoding="utf-8")
        assert regenerate(paths, generation=7, check=True).status == RunStatus.CHANGED
        assert (data_dir / "learnsets-g7.js").read_text(encoding="utf-8") == before

        regenerate(paths, generation=7, force=True)
        assert regenerate(paths, generation=7, check=True).status == RunStatus.UNCHANGED


class TestMain:
    def _argv(self, data_dir, *extra):
        return [
            "--database", str(data_dir / "learnsets.json"),
            "--species-index", str(data_dir / "pokedex.json"),
            "--snapshot", str(data_dir / "learnsets-g7.js"),
            *extra,
        ]

    def test_success(self, data_dir):
        assert main(self._argv(data_dir, "--force")) == 0
        assert "ivysaur" in (data_dir / "learnsets-g7.js").read_text(encoding="utf-8")

    def test_missing_database_exit_code(self, data_dir):
        (data_dir / "learnsets.json").unlink()
        assert main(self._argv(data_dir)) == 1

    def test_check_exit_code(self, data_dir):
        assert main(self._argv(data_dir, "--check")) == 1
        assert main(self._argv(data_dir, "--force")) == 0
        assert main(self._argv(data_dir, "--check")) == 0

    def test_export_name(self, data_dir):
        output = data_dir / "g6.js"
        argv = self._argv(data_dir, "--generation", "6", "--export-name", "Learnsets6", "--output", str(output))
        assert main(argv) == 0
        assert output.read_text(encoding="utf-8").startswith("exports.Learnsets6 = {\n")
