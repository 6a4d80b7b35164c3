"""
Terminal progress output.

ConsoleReporter renders the watch loop's spinner and status lines.
ProgressEstimator wraps one-shot build steps in a spinner that shows how
long the same step took last time.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from rich.console import Console
from rich.markup import escape
from rich.status import Status

if TYPE_CHECKING:
    from bundlekit.core.errors import CompileError

logger = logging.getLogger(__name__)

T = TypeVar("T")

TIMINGS_FILENAME = "timings.json"


class ConsoleReporter:
    """Rich-based progress output for watch sessions."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()
        self._status: Status | None = None

    def _stop(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def clear(self) -> None:
        self.console.clear()

    def compiling(self) -> None:
        self._stop()
        self._status = self.console.status("[bold cyan]Compiling modules...")
        self._status.start()

    def failed(self, error: CompileError | None) -> None:
        self._stop()
        self.console.print("[bold red]✖ Failed to compile[/bold red]")
        if error is not None:
            self.console.print(escape(str(error)), style="red", highlight=False)

    def succeeded(self) -> None:
        self._stop()
        self.console.print("[bold green]✔ Compiled successfully[/bold green]")

    def watching(self) -> None:
        self.console.print("\n  [dim]Watching for changes[/dim]\n")


class ProgressEstimator:
    """
    Spinner with a remembered duration per task label.

    Timings live in ``node_modules/.cache/.progress-estimator/timings.json``;
    failing to read or write them never affects the build.
    """

    def __init__(self, storage_dir: Path | None, console: Console | None = None):
        self.storage_dir = storage_dir
        self.console = console or Console()
        self._timings = self._load()

    @property
    def _storage_file(self) -> Path | None:
        if self.storage_dir is None:
            return None
        return self.storage_dir / TIMINGS_FILENAME

    def _load(self) -> dict[str, float]:
        path = self._storage_file
        if path is None or not path.exists():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.debug(f"Ignoring progress cache {path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: float(v) for k, v in data.items() if isinstance(v, int | float)}

    def _save(self) -> None:
        path = self._storage_file
        if path is None:
            return
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(self._timings, indent=2), encoding="utf-8")
        except OSError as e:
            logger.debug(f"Could not write progress cache {path}: {e}")

    def estimate(self, label: str) -> float | None:
        return self._timings.get(label)

    def track(self, label: str, task: Callable[[], T]) -> T:
        """Run *task* under a spinner; record its duration only if it succeeds."""
        estimate = self.estimate(label)
        text = f"[bold cyan]{label}..."
        if estimate is not None:
            text += f" [dim](~{estimate:.1f}s)[/dim]"

        started = time.monotonic()
        with self.console.status(text):
            result = task()
        elapsed = time.monotonic() - started

        self._timings[label] = round(elapsed, 2)
        self._save()
        self.console.print(f"[green]✔[/green] {label} [dim]{elapsed:.1f}s[/dim]")
        return result
