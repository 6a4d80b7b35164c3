"""
bundlekit core: option normalization, entry resolution, build matrix and
dist/ housekeeping. Nothing in here talks to the bundler or spawns processes.
"""

from .configs import UnitConfig, create_build_configs, load_config_override
from .entries import resolve_entries
from .errors import (
    BuildContext,
    BundlekitError,
    CompileError,
    ConfigError,
    HookSpawnError,
    MetadataRelocationError,
    NoEntryFoundError,
)
from .matrix import BuildUnit, build_matrix
from .options import Environment, Format, HookCommands, NormalizedOptions, Target, normalize_options
from .paths import ProjectPaths

__all__ = [
    # Options
    "Environment",
    "Format",
    "HookCommands",
    "NormalizedOptions",
    "Target",
    "normalize_options",
    "resolve_entries",
    "ProjectPaths",
    # Matrix
    "BuildUnit",
    "build_matrix",
    "UnitConfig",
    "create_build_configs",
    "load_config_override",
    # Errors
    "BuildContext",
    "BundlekitError",
    "CompileError",
    "ConfigError",
    "HookSpawnError",
    "MetadataRelocationError",
    "NoEntryFoundError",
]
