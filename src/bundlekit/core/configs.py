"""
Bundler-facing configuration for build units.

``create_build_configs`` translates each BuildUnit into a UnitConfig and
then passes it through the project's override hook, if there is one.

Override hook
-------------
A ``bundlekit_config.py`` at the project root may define::

    def bundler(config, unit):
        return config.model_copy(update={"sourcemap": False})

It is called once per unit, after the matrix is built, and must return a
UnitConfig. It can change how a unit is built but never which units exist.
"""

from __future__ import annotations

import importlib.util
import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigError
from .matrix import BuildUnit, build_matrix
from .options import Environment, Format, NormalizedOptions, Target
from .package import safe_package_name, safe_variable_name
from .paths import ProjectPaths

logger = logging.getLogger(__name__)

# Format names as the rollup CLI spells them
BUNDLER_FORMAT_NAMES = {
    Format.CJS: "cjs",
    Format.ESM: "es",
    Format.UMD: "umd",
    Format.SYSTEM: "system",
}

FORMATS_BY_BUNDLER_NAME = {name: fmt for fmt, name in BUNDLER_FORMAT_NAMES.items()}


class UnitConfig(BaseModel):
    """Everything the bundler needs to build one unit."""

    model_config = ConfigDict(frozen=True)

    input: Path
    output_file: Path
    format: str
    environment: Environment
    target: Target = Target.BROWSER
    name: str = ""
    minify: bool = False
    sourcemap: bool = True
    write_meta: bool = False
    extra: dict[str, Any] = Field(default_factory=dict)


ConfigOverride = Callable[[UnitConfig, BuildUnit], UnitConfig]


def entry_qualifier(options: NormalizedOptions, entry: Path) -> str | None:
    """Entry stem carried in output names, or None with a single entry."""
    if len(options.entries) > 1:
        return entry.stem
    return None


def output_basename(options: NormalizedOptions, unit: BuildUnit) -> str:
    """
    Output file name (without directory) for *unit*.

    ``<base>.<format>[.<env>][.min].js``: with a single entry ``<base>`` is
    the safe package name; with several it also carries the entry's stem so
    outputs cannot collide.
    """
    base = safe_package_name(options.package_name or ".", options.working_directory)
    qualifier = entry_qualifier(options, unit.entry)
    if qualifier:
        base = f"{base}.{qualifier}"

    parts = [base, unit.format.value]
    if unit.environment != Environment.NONE:
        parts.append(unit.environment.value)
    if unit.environment == Environment.PRODUCTION:
        parts.append("min")
    parts.append("js")
    return ".".join(parts)


def create_unit_config(options: NormalizedOptions, unit: BuildUnit) -> UnitConfig:
    paths = ProjectPaths.at(options.working_directory)
    return UnitConfig(
        input=unit.entry,
        output_file=paths.dist_dir / output_basename(options, unit),
        format=BUNDLER_FORMAT_NAMES[unit.format],
        environment=unit.environment,
        target=options.target,
        name=safe_variable_name(options.package_name or paths.root.name),
        minify=unit.environment == Environment.PRODUCTION,
        write_meta=unit.write_meta,
    )


def create_build_configs(
    options: NormalizedOptions,
    units: Sequence[BuildUnit] | None = None,
    override: ConfigOverride | None = None,
) -> list[UnitConfig]:
    """
    Translate build units into bundler configs.

    Args:
        options: Normalized options
        units: Units to translate (the full matrix when None)
        override: Per-unit transform applied after translation

    Raises:
        ConfigError: If the override returns something other than a UnitConfig
    """
    if units is None:
        units = build_matrix(options)

    configs: list[UnitConfig] = []
    for unit in units:
        config = create_unit_config(options, unit)
        if override is not None:
            config = override(config, unit)
            if not isinstance(config, UnitConfig):
                raise ConfigError(
                    f"Config override returned {type(config).__name__}, expected UnitConfig "
                    f"(unit {unit.label})"
                )
        configs.append(config)
    return configs


def load_config_override(paths: ProjectPaths) -> ConfigOverride | None:
    """
    Load the ``bundler`` function from the project's bundlekit_config.py.

    Returns:
        The override callable, or None when the file does not exist

    Raises:
        ConfigError: If the module fails to import or has no callable ``bundler``
    """
    module_path: Path = paths.override_module
    if not module_path.is_file():
        return None

    spec = importlib.util.spec_from_file_location("bundlekit_project_config", module_path)
    if spec is None or spec.loader is None:
        raise ConfigError(f"Cannot load {module_path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigError(f"Error importing {module_path}: {e}") from e

    override = getattr(module, "bundler", None)
    if not callable(override):
        raise ConfigError(f"{module_path} must define a callable 'bundler(config, unit)'")

    logger.debug(f"Using config override from {module_path}")
    return override
