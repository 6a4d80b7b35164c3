"""
Bundler adapter contract.

A bundler builds one UnitConfig at a time (one-shot mode) or, in watch
mode, returns an EventSource: an iterator of BundlerEvents that the watch
orchestrator pulls from a single loop. Events for a session are strictly
ordered; every START is closed by exactly one ERROR or END.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Protocol, runtime_checkable

from bundlekit.core.configs import UnitConfig
from bundlekit.core.errors import CompileError


class EventCode(StrEnum):
    """Watch-mode lifecycle events."""

    START = "START"
    ERROR = "ERROR"
    END = "END"


@dataclass(frozen=True)
class BundlerEvent:
    """One event from the bundler's watch stream."""

    code: EventCode
    error: CompileError | None = None

    @classmethod
    def start(cls) -> BundlerEvent:
        return cls(EventCode.START)

    @classmethod
    def end(cls) -> BundlerEvent:
        return cls(EventCode.END)

    @classmethod
    def failed(cls, error: CompileError) -> BundlerEvent:
        return cls(EventCode.ERROR, error)


@runtime_checkable
class EventSource(Protocol):
    """Pull-based stream of watch events; ``close`` ends the subscription."""

    def __iter__(self) -> Iterator[BundlerEvent]: ...

    def close(self) -> None: ...


class BundlerAdapter(Protocol):
    """What bundlekit needs from a bundling backend."""

    def build(self, config: UnitConfig) -> list[Path]:
        """
        Build one unit.

        Returns:
            Paths of the written artifacts

        Raises:
            CompileError: If the bundler fails
        """
        ...

    def watch(self, configs: Sequence[UnitConfig]) -> EventSource:
        """Start watching; the returned source stays open until closed."""
        ...
