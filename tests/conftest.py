"""Shared pytest fixtures for bundlekit tests."""

import json
from pathlib import Path

import pytest

from bundlekit.core.options import Format, HookCommands, NormalizedOptions, Target


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create a minimal TypeScript library project."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "index.ts").write_text("export const sum = (a: number, b: number) => a + b;\n")
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "my-lib", "version": "0.1.0"}, indent=2)
    )
    return tmp_path


@pytest.fixture
def make_options():
    """Factory for NormalizedOptions that never touches the filesystem."""

    def _make(
        entries: tuple[str, ...] = ("/project/src/index.ts",),
        formats: tuple[Format, ...] = (Format.CJS, Format.ESM),
        package_name: str = "my-lib",
        hooks: HookCommands | None = None,
        working_directory: str = "/project",
        **kwargs,
    ) -> NormalizedOptions:
        return NormalizedOptions(
            entries=tuple(Path(e) for e in entries),
            formats=formats,
            package_name=package_name,
            target=kwargs.pop("target", Target.BROWSER),
            hooks=hooks or HookCommands(),
            working_directory=Path(working_directory),
            **kwargs,
        )

    return _make
