"""Unit tests for entry module resolution."""

from pathlib import Path

import pytest

from bundlekit.core.entries import resolve_entries, resolve_file
from bundlekit.core.errors import NoEntryFoundError


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("export {};\n")
    return path


class TestConventionalEntry:
    def test_prefers_ts(self, tmp_path: Path):
        _touch(tmp_path / "src" / "index.ts")
        _touch(tmp_path / "src" / "index.js")

        entries = resolve_entries([], None, tmp_path)

        assert entries == ((tmp_path / "src" / "index.ts").resolve(),)

    @pytest.mark.parametrize("ext", [".tsx", ".jsx"])
    def test_probes_extensions_in_order(self, tmp_path: Path, ext: str):
        _touch(tmp_path / "src" / f"index{ext}")
        _touch(tmp_path / "src" / "index.js")

        entries = resolve_entries([], None, tmp_path)

        assert entries[0].suffix == ext

    def test_falls_back_to_js(self, tmp_path: Path):
        _touch(tmp_path / "src" / "index.js")
        assert resolve_entries([], None, tmp_path)[0].name == "index.js"

    @pytest.mark.parametrize("dirname", ["lib[1]", "what?", "star*lib"])
    def test_project_path_with_glob_characters(self, tmp_path: Path, dirname: str):
        root = tmp_path / dirname
        index = _touch(root / "src" / "index.ts")

        assert resolve_entries([], None, root) == (index.resolve(),)

    def test_resolve_file_guesses_js_without_checking(self, tmp_path: Path):
        (tmp_path / "src").mkdir()
        guess = resolve_file("src/index", tmp_path)
        assert guess == (tmp_path / "src" / "index.js").resolve()
        assert not guess.exists()

    def test_src_without_any_index_raises(self, tmp_path: Path):
        (tmp_path / "src").mkdir()
        with pytest.raises(NoEntryFoundError):
            resolve_entries([], None, tmp_path)

    def test_no_src_and_no_hint_raises(self, tmp_path: Path):
        with pytest.raises(NoEntryFoundError, match="No entry module found"):
            resolve_entries([], None, tmp_path)


class TestSourceHint:
    def test_hint_used_when_no_explicit_entries(self, tmp_path: Path):
        _touch(tmp_path / "lib" / "main.ts")
        _touch(tmp_path / "src" / "index.ts")

        entries = resolve_entries([], "lib/main.ts", tmp_path)

        assert entries == ((tmp_path / "lib" / "main.ts").resolve(),)

    def test_explicit_entries_win_over_hint(self, tmp_path: Path):
        _touch(tmp_path / "lib" / "main.ts")
        _touch(tmp_path / "src" / "other.ts")

        entries = resolve_entries(["src/other.ts"], "lib/main.ts", tmp_path)

        assert [e.name for e in entries] == ["other.ts"]


class TestExplicitEntries:
    def test_glob_expansion(self, tmp_path: Path):
        _touch(tmp_path / "src" / "a.ts")
        _touch(tmp_path / "src" / "b.ts")
        _touch(tmp_path / "src" / "c.css")

        entries = resolve_entries(["src/*.ts"], None, tmp_path)

        assert sorted(e.name for e in entries) == ["a.ts", "b.ts"]
        assert all(e.is_absolute() for e in entries)

    def test_recursive_glob(self, tmp_path: Path):
        _touch(tmp_path / "src" / "a.ts")
        _touch(tmp_path / "src" / "nested" / "deep" / "b.ts")

        entries = resolve_entries(["src/**/*.ts"], None, tmp_path)

        assert sorted(e.name for e in entries) == ["a.ts", "b.ts"]

    def test_duplicates_removed(self, tmp_path: Path):
        _touch(tmp_path / "src" / "a.ts")
        _touch(tmp_path / "src" / "b.ts")

        entries = resolve_entries(["src/a.ts", "src/*.ts", "./src/a.ts"], None, tmp_path)

        assert sorted(e.name for e in entries) == ["a.ts", "b.ts"]

    def test_absolute_pattern(self, tmp_path: Path):
        target = _touch(tmp_path / "src" / "a.ts")
        entries = resolve_entries([str(target)], None, tmp_path / "elsewhere")
        assert entries == (target.resolve(),)

    def test_directories_are_not_entries(self, tmp_path: Path):
        (tmp_path / "src" / "components.ts").mkdir(parents=True)
        _touch(tmp_path / "src" / "index.ts")

        entries = resolve_entries(["src/*.ts"], None, tmp_path)

        assert [e.name for e in entries] == ["index.ts"]

    def test_unmatched_patterns_raise(self, tmp_path: Path):
        with pytest.raises(NoEntryFoundError, match="matched no files"):
            resolve_entries(["src/missing.ts"], None, tmp_path)

    def test_partially_matching_patterns_keep_matches(self, tmp_path: Path):
        _touch(tmp_path / "src" / "a.ts")
        entries = resolve_entries(["src/a.ts", "src/missing.ts"], None, tmp_path)
        assert [e.name for e in entries] == ["a.ts"]
