"""Unit tests for option parsing and normalization."""

from pathlib import Path

import pytest

from bundlekit.core.errors import ConfigError, NoEntryFoundError
from bundlekit.core.options import (
    Format,
    HookCommands,
    NormalizedOptions,
    Target,
    normalize_options,
    parse_formats,
    parse_target,
)
from bundlekit.core.package import PackageInfo


class TestParseFormats:
    def test_comma_separated(self):
        assert parse_formats("cjs,esm,umd") == (Format.CJS, Format.ESM, Format.UMD)

    def test_es_alias(self):
        assert parse_formats("es") == (Format.ESM,)

    def test_alias_and_canonical_collapse(self):
        assert parse_formats("esm,cjs,es") == (Format.ESM, Format.CJS)

    def test_whitespace_and_case(self):
        assert parse_formats(" CJS , system ") == (Format.CJS, Format.SYSTEM)

    def test_accepts_list(self):
        assert parse_formats(["umd", "es"]) == (Format.UMD, Format.ESM)

    def test_unknown_format(self):
        with pytest.raises(ConfigError, match="Unknown format 'amd'"):
            parse_formats("cjs,amd")

    def test_empty(self):
        with pytest.raises(ConfigError):
            parse_formats(" , ")


class TestParseTarget:
    def test_known(self):
        assert parse_target("Node") == Target.NODE

    def test_unknown(self):
        with pytest.raises(ConfigError):
            parse_target("deno")


class TestHookCommands:
    def test_blank_commands_are_unset(self):
        hooks = HookCommands(first_success="  ", success="", failure="echo failed")
        assert hooks.first_success is None
        assert hooks.success is None
        assert hooks.failure == "echo failed"


class TestNormalizedOptions:
    def test_is_frozen(self, make_options):
        options = make_options()
        with pytest.raises(ValueError):
            options.verbose = True

    def test_requires_entries(self):
        with pytest.raises(ValueError):
            NormalizedOptions(entries=(), formats=(Format.CJS,), working_directory=Path("/p"))

    def test_requires_absolute_entries(self):
        with pytest.raises(ValueError, match="absolute"):
            NormalizedOptions(
                entries=(Path("src/index.ts"),),
                formats=(Format.CJS,),
                working_directory=Path("/p"),
            )

    def test_formats_deduplicated(self):
        options = NormalizedOptions(
            entries=(Path("/p/a.ts"),),
            formats=(Format.CJS, Format.ESM, Format.CJS),
            working_directory=Path("/p"),
        )
        assert options.formats == (Format.CJS, Format.ESM)


class TestNormalizeOptions:
    def test_defaults_from_package_json(self, project_dir: Path):
        options = normalize_options(working_directory=project_dir)

        assert options.package_name == "my-lib"
        assert options.formats == (Format.CJS, Format.ESM)
        assert options.target == Target.BROWSER
        assert options.entries == ((project_dir / "src" / "index.ts").resolve(),)
        assert options.working_directory == project_dir.resolve()

    def test_explicit_name_wins(self, project_dir: Path):
        options = normalize_options(working_directory=project_dir, name="OtherLib")
        assert options.package_name == "OtherLib"

    def test_source_hint_from_package(self, tmp_path: Path):
        (tmp_path / "lib").mkdir()
        (tmp_path / "lib" / "entry.ts").write_text("export {};\n")

        options = normalize_options(
            working_directory=tmp_path,
            package=PackageInfo(name="x", source="lib/entry.ts"),
        )

        assert [e.name for e in options.entries] == ["entry.ts"]

    def test_hooks_and_flags(self, project_dir: Path):
        options = normalize_options(
            working_directory=project_dir,
            format="es",
            target="node",
            clean=False,
            verbose=True,
            on_first_success="node dist/index.js",
            on_failure="",
        )

        assert options.formats == (Format.ESM,)
        assert options.target == Target.NODE
        assert options.clean_before_build is False
        assert options.verbose is True
        assert options.hooks.first_success == "node dist/index.js"
        assert options.hooks.failure is None

    def test_bad_format_reported_before_entries(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            normalize_options(working_directory=tmp_path, format="amd")

    def test_no_entry(self, tmp_path: Path):
        with pytest.raises(NoEntryFoundError):
            normalize_options(working_directory=tmp_path)
