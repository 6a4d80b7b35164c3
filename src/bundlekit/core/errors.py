"""
Error types for bundlekit entry resolution, bundling, and watch hooks.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .matrix import BuildUnit


class BundlekitError(Exception):
    """Base exception for all bundlekit errors."""

    def __init__(self, message: str, context: BuildContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ConfigError(BundlekitError):
    """
    Raised when options or project configuration are invalid.

    Examples:
    - Unknown module format or target
    - Malformed bundlekit.toml
    - bundlekit_config.py without a callable ``bundler``
    """

    pass


class NoEntryFoundError(BundlekitError):
    """
    Raised when no entry module can be resolved.

    Examples:
    - Explicit --entry patterns that match no files
    - No ``source`` in package.json and no ``src`` directory
    """

    pass


class CompileError(BundlekitError):
    """
    Raised when the bundler fails to produce a build unit.

    Carries the bundler's diagnostic output and, when known, the unit
    that failed.
    """

    def __init__(
        self,
        message: str,
        diagnostic: str = "",
        unit: BuildUnit | None = None,
        context: BuildContext | None = None,
    ):
        self.diagnostic = diagnostic
        self.unit = unit
        if context is None and unit is not None:
            context = BuildContext.from_unit(unit)
        super().__init__(message, context)

    def _format_message(self) -> str:
        text = super()._format_message()
        if self.diagnostic:
            return f"{text}\n{self.diagnostic.rstrip()}"
        return text


class HookSpawnError(BundlekitError):
    """Raised when a watch hook command cannot be launched."""

    def __init__(self, message: str, command: str = ""):
        self.command = command
        super().__init__(message)


class MetadataRelocationError(BundlekitError):
    """Raised when moving emitted type declarations into dist/ fails."""

    pass


@dataclass
class BuildContext:
    """
    Identifies the build unit an error belongs to.

    Attributes:
        entry: Entry module the unit was built from
        module_format: Module format (cjs, esm, umd, system)
        environment: development, production or none
    """

    entry: Path
    module_format: str
    environment: str

    @classmethod
    def from_unit(cls, unit: BuildUnit) -> BuildContext:
        return cls(
            entry=unit.entry,
            module_format=str(unit.format),
            environment=str(unit.environment),
        )

    def format(self) -> str:
        """
        Format as a human-readable location.

        Returns:
            String like: "src/index.ts [cjs/production]"
        """
        return f"{self.entry} [{self.module_format}/{self.environment}]"
