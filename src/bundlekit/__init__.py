"""
bundlekit - build matrix generator and watch-mode orchestrator for
JavaScript/TypeScript library bundles.
"""

from __future__ import annotations

from ._version import get_version
from .core.errors import (
    BundlekitError,
    CompileError,
    ConfigError,
    HookSpawnError,
    MetadataRelocationError,
    NoEntryFoundError,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "BundlekitError",
    "CompileError",
    "ConfigError",
    "HookSpawnError",
    "MetadataRelocationError",
    "NoEntryFoundError",
]
