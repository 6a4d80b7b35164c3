"""
Option normalization.

Raw CLI/manifest values are turned into a single immutable
``NormalizedOptions`` that the build matrix and the watch orchestrator
consume. Normalization is the only place that resolves entries and reads
package.json; everything downstream is pure.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .entries import resolve_entries
from .errors import ConfigError
from .package import PackageInfo, load_package_info
from .paths import ProjectPaths


class Format(StrEnum):
    """Output module formats."""

    CJS = "cjs"
    ESM = "esm"
    UMD = "umd"
    SYSTEM = "system"


class Target(StrEnum):
    """Runtime the bundle is built for."""

    BROWSER = "browser"
    NODE = "node"


class Environment(StrEnum):
    """NODE_ENV a build unit is compiled against."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    NONE = "none"


FORMAT_ALIASES = {"es": Format.ESM}


class HookCommands(BaseModel):
    """Shell commands run by the watch orchestrator."""

    model_config = ConfigDict(frozen=True)

    first_success: str | None = None
    success: str | None = None
    failure: str | None = None

    @field_validator("first_success", "success", "failure")
    @classmethod
    def _blank_is_unset(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value


class NormalizedOptions(BaseModel):
    """Fully resolved options for one build or watch invocation."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[Path, ...] = Field(min_length=1)
    formats: tuple[Format, ...] = Field(min_length=1)
    package_name: str = ""
    target: Target = Target.BROWSER
    clean_before_build: bool = True
    hooks: HookCommands = Field(default_factory=HookCommands)
    verbose: bool = False
    working_directory: Path

    @field_validator("entries")
    @classmethod
    def _entries_absolute(cls, value: tuple[Path, ...]) -> tuple[Path, ...]:
        for entry in value:
            if not entry.is_absolute():
                raise ValueError(f"entry must be an absolute path: {entry}")
        return value

    @field_validator("formats")
    @classmethod
    def _formats_unique(cls, value: tuple[Format, ...]) -> tuple[Format, ...]:
        return tuple(dict.fromkeys(value))


def parse_formats(value: str | list[str] | tuple[str, ...]) -> tuple[Format, ...]:
    """
    Parse a comma-separated format list.

    ``es`` is accepted as an alias for ``esm``; duplicates collapse while
    keeping the first occurrence's position.

    Raises:
        ConfigError: If the list is empty or names an unknown format
    """
    items = value.split(",") if isinstance(value, str) else list(value)
    formats: list[Format] = []
    for raw in items:
        name = raw.strip().lower()
        if not name:
            continue
        if name in FORMAT_ALIASES:
            fmt = FORMAT_ALIASES[name]
        else:
            try:
                fmt = Format(name)
            except ValueError:
                allowed = ", ".join(f.value for f in Format)
                raise ConfigError(f"Unknown format '{raw.strip()}' (expected one of: {allowed}, es)")
        if fmt not in formats:
            formats.append(fmt)
    if not formats:
        raise ConfigError("At least one output format is required")
    return tuple(formats)


def parse_target(value: str) -> Target:
    try:
        return Target(value.strip().lower())
    except ValueError:
        raise ConfigError(f"Unknown target '{value}' (expected 'browser' or 'node')")


def normalize_options(
    *,
    working_directory: Path | str,
    entry: list[str] | tuple[str, ...] = (),
    format: str = "cjs,esm",
    target: str = "browser",
    name: str = "",
    clean: bool = True,
    verbose: bool = False,
    on_first_success: str | None = None,
    on_success: str | None = None,
    on_failure: str | None = None,
    package: PackageInfo | None = None,
) -> NormalizedOptions:
    """
    Build NormalizedOptions from raw option values.

    Args:
        working_directory: Project root that relative paths resolve against
        entry: Explicit entry paths or glob patterns
        format: Comma-separated module formats
        target: ``browser`` or ``node``
        name: Package/UMD name; falls back to package.json ``name``
        clean: Remove dist/ before building
        verbose: Keep console output between watch cycles
        on_first_success: Hook command for the first successful watch cycle
        on_success: Hook command for later successful cycles
        on_failure: Hook command for failed cycles
        package: Pre-loaded package.json info (read from disk when None)

    Raises:
        ConfigError: Unknown format or target
        NoEntryFoundError: No entry module could be resolved
    """
    paths = ProjectPaths.at(working_directory)
    if package is None:
        package = load_package_info(paths)

    formats = parse_formats(format)
    resolved_target = parse_target(target)
    entries = resolve_entries(list(entry), package.source, paths.root)

    return NormalizedOptions(
        entries=entries,
        formats=formats,
        package_name=name or package.name,
        target=resolved_target,
        clean_before_build=clean,
        hooks=HookCommands(
            first_success=on_first_success,
            success=on_success,
            failure=on_failure,
        ),
        verbose=verbose,
        working_directory=paths.root,
    )
