"""
Polling file watcher and the queue-backed event source built on it.

The watcher uses mtime-based change detection (cross-platform, no native
dependencies). A PollingEventSource owns one background thread that runs
build cycles one at a time and publishes START / ERROR / END events into a
queue; consumers iterate the source from their own thread.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

from bundlekit.core.errors import CompileError

from .base import BundlerEvent, EventCode

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = ("*.ts", "*.tsx", "*.js", "*.jsx", "*.json", "*.css")
EXCLUDED_DIRS = frozenset({"node_modules", ".git"})


class FileWatcher:
    """
    Tracks mtimes of matching files under a set of paths.

    ``poll()`` returns the files that appeared, changed or disappeared since
    the previous call.
    """

    def __init__(
        self,
        paths: Sequence[Path],
        patterns: Sequence[str] = DEFAULT_PATTERNS,
        excluded_dirs: frozenset[str] = EXCLUDED_DIRS,
    ):
        self.paths = list(paths)
        self.patterns = list(patterns)
        self.excluded_dirs = excluded_dirs
        self._file_mtimes: dict[Path, float] = self._scan_files()

    def _scan_files(self) -> dict[Path, float]:
        """Scan all watched paths and return file mtimes."""
        mtimes: dict[Path, float] = {}

        for watch_path in self.paths:
            if not watch_path.exists():
                continue

            if watch_path.is_file():
                try:
                    mtimes[watch_path] = watch_path.stat().st_mtime
                except OSError:
                    pass
                continue

            for pattern in self.patterns:
                for file_path in watch_path.rglob(pattern):
                    if self.excluded_dirs.intersection(file_path.relative_to(watch_path).parts):
                        continue
                    try:
                        mtimes[file_path] = file_path.stat().st_mtime
                    except OSError:
                        # Deleted between listing and stat
                        pass

        return mtimes

    def poll(self) -> list[Path]:
        current = self._scan_files()
        changed = [
            path
            for path, mtime in current.items()
            if path not in self._file_mtimes or mtime > self._file_mtimes[path]
        ]
        changed.extend(path for path in self._file_mtimes if path not in current)
        self._file_mtimes = current
        return changed


class _Closed:
    """Queue sentinel marking the end of the stream."""


_CLOSED = _Closed()


class PollingEventSource:
    """
    Event source that rebuilds on file changes.

    One cycle runs as soon as the source starts; after that, every batch of
    changes (collected for ``debounce`` seconds) triggers one more cycle.
    Changes made while a cycle is running are picked up by the next poll.

    A new cycle does not start until the consumer has finished handling the
    previous cycle's END or ERROR (that is, has asked for the next event),
    so post-build steps run on the consumer side never overlap the next
    build's writes to dist/.
    """

    def __init__(
        self,
        build_cycle: Callable[[], None],
        watch_paths: Sequence[Path],
        patterns: Sequence[str] = DEFAULT_PATTERNS,
        poll_interval: float = 0.5,
        debounce: float = 0.1,
    ):
        """
        Args:
            build_cycle: Builds every unit; raises CompileError on failure
            watch_paths: Directories or files to watch
            patterns: Glob patterns matched inside watched directories
            poll_interval: How often to check for changes (seconds)
            debounce: Quiet period after a change before rebuilding (seconds)
        """
        self._build_cycle = build_cycle
        self._watch_paths = list(watch_paths)
        self._patterns = list(patterns)
        self.poll_interval = poll_interval
        self.debounce = debounce

        self._events: queue.Queue[BundlerEvent | _Closed] = queue.Queue()
        self._stop_event = threading.Event()
        # Set once the consumer has moved past the last cycle's END / ERROR
        self._cycle_handled = threading.Event()
        self._cycle_handled.set()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._watch_loop, name="bundlekit-watch", daemon=True)
        self._thread.start()

    def close(self) -> None:
        """Stop watching; iteration ends after already-queued events."""
        self._stop_event.set()
        self._events.put(_CLOSED)
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=2)

    @property
    def closed(self) -> bool:
        return self._stop_event.is_set()

    def __iter__(self) -> Iterator[BundlerEvent]:
        while True:
            try:
                item = self._events.get(timeout=0.25)
            except queue.Empty:
                if self._stop_event.is_set() and (self._thread is None or not self._thread.is_alive()):
                    return
                continue
            if isinstance(item, _Closed):
                return
            yield item
            if item.code != EventCode.START:
                self._cycle_handled.set()

    @property
    def cycle_handled(self) -> bool:
        return self._cycle_handled.is_set()

    def _wait_until_handled(self) -> bool:
        """Block until the previous cycle was consumed; False if closed meanwhile."""
        while not self._cycle_handled.wait(0.1):
            if self._stop_event.is_set():
                return False
        return True

    def _run_cycle(self) -> None:
        self._cycle_handled.clear()
        self._events.put(BundlerEvent.start())
        try:
            self._build_cycle()
        except CompileError as e:
            self._events.put(BundlerEvent.failed(e))
        except Exception as e:
            logger.exception("Unexpected error during build cycle", extra={"component": "WATCH"})
            self._events.put(BundlerEvent.failed(CompileError(f"Unexpected build failure: {e}")))
        else:
            self._events.put(BundlerEvent.end())

    def _watch_loop(self) -> None:
        watcher = FileWatcher(self._watch_paths, self._patterns)
        self._run_cycle()

        while not self._stop_event.wait(self.poll_interval):
            if not self._wait_until_handled():
                break
            changed = watcher.poll()
            if not changed:
                continue

            # Let editors finish writing before rebuilding
            if self._stop_event.wait(self.debounce):
                break
            changed.extend(watcher.poll())
            logger.debug(
                f"{len(changed)} file(s) changed, rebuilding",
                extra={"component": "WATCH", "context": {"files": [str(p) for p in changed[:20]]}},
            )
            self._run_cycle()
