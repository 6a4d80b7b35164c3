"""Fakes for process spawning, bundling and progress output."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pytest

from bundlekit.bundler.base import BundlerEvent
from bundlekit.core.configs import UnitConfig
from bundlekit.core.errors import CompileError


class FakeProcess:
    """Popen stand-in that records termination requests."""

    def __init__(self, argv: list[str], log: list[tuple[str, tuple[str, ...]]]):
        self.argv = list(argv)
        self.returncode: int | None = None
        self._log = log

    def poll(self) -> int | None:
        return self.returncode

    def terminate(self) -> None:
        self._log.append(("terminate", tuple(self.argv)))
        self.returncode = -15

    def exit(self, code: int = 0) -> None:
        self.returncode = code


class FakeSpawner:
    """Popen-compatible callable keeping an ordered log of spawns and terminations."""

    def __init__(self) -> None:
        self.log: list[tuple[str, tuple[str, ...]]] = []
        self.processes: list[FakeProcess] = []
        self.missing: set[str] = set()

    def __call__(self, argv: list[str], **kwargs: Any) -> FakeProcess:
        if argv[0] in self.missing:
            raise FileNotFoundError(2, "No such file or directory", argv[0])
        self.log.append(("spawn", tuple(argv)))
        process = FakeProcess(argv, self.log)
        self.processes.append(process)
        return process

    def spawned(self) -> list[tuple[str, ...]]:
        return [argv for kind, argv in self.log if kind == "spawn"]

    def terminated(self) -> list[tuple[str, ...]]:
        return [argv for kind, argv in self.log if kind == "terminate"]


class RecordingReporter:
    """WatchReporter that records calls instead of printing."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.errors: list[CompileError | None] = []

    def clear(self) -> None:
        self.calls.append("clear")

    def compiling(self) -> None:
        self.calls.append("compiling")

    def failed(self, error: CompileError | None) -> None:
        self.calls.append("failed")
        self.errors.append(error)

    def succeeded(self) -> None:
        self.calls.append("succeeded")

    def watching(self) -> None:
        self.calls.append("watching")


class ListEventSource:
    """EventSource over a fixed list of events."""

    def __init__(self, events: list[BundlerEvent]):
        self.events = list(events)
        self.closed = False

    def __iter__(self):
        return iter(self.events)

    def close(self) -> None:
        self.closed = True


class FakeBundler:
    """BundlerAdapter that records builds and can fail chosen formats."""

    def __init__(self, fail_formats: set[str] | None = None, events: list[BundlerEvent] | None = None):
        self.fail_formats = fail_formats or set()
        self.events = events or []
        self.built: list[UnitConfig] = []
        self.watched: list[UnitConfig] = []
        self.source: ListEventSource | None = None

    def build(self, config: UnitConfig) -> list[Path]:
        self.built.append(config)
        if config.format in self.fail_formats:
            raise CompileError("Bundler exited with code 1", diagnostic="SyntaxError: Unexpected token")
        return [config.output_file]

    def watch(self, configs: list[UnitConfig]) -> ListEventSource:
        self.watched = list(configs)
        self.source = ListEventSource(self.events)
        return self.source


@pytest.fixture(autouse=True)
def _reset_bundlekit_logger():
    """Drop handlers installed by CLI commands so they don't outlive the test."""
    yield
    logger = logging.getLogger("bundlekit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def spawner() -> FakeSpawner:
    return FakeSpawner()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
