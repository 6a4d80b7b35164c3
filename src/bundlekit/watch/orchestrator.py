"""
Watch-mode orchestration.

The orchestrator pulls events from the bundler's event source one at a
time and drives a small state machine:

    Idle/Succeeded/Failed --START--> Compiling
    Compiling --ERROR--> Failed      (failure hook)
    Compiling --END-->   Succeeded   (relocate types, then first-success
                                      or success hook)

It never stops on its own; the session lasts until the event source ends
or the user interrupts it, and on the way out every hook process is
terminated.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from bundlekit.bundler.base import BundlerEvent, EventCode
from bundlekit.core.errors import MetadataRelocationError
from bundlekit.core.options import HookCommands

from .hooks import HookProcessManager, HookSlot

if TYPE_CHECKING:
    from bundlekit.core.errors import CompileError

logger = logging.getLogger(__name__)

# Cleared at the start of every cycle; first_success is one-shot
CYCLE_SLOTS = (HookSlot.SUCCESS, HookSlot.FAILURE)


class Phase(StrEnum):
    IDLE = "idle"
    COMPILING = "compiling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class WatchCycleState:
    """Snapshot of the orchestrator's state."""

    phase: Phase = Phase.IDLE
    has_seen_first_success: bool = False


class WatchReporter(Protocol):
    """User-visible progress output for watch sessions."""

    def clear(self) -> None: ...

    def compiling(self) -> None: ...

    def failed(self, error: CompileError | None) -> None: ...

    def succeeded(self) -> None: ...

    def watching(self) -> None: ...


class WatchOrchestrator:
    """
    Consumes bundler events and fires hooks.

    Usage:
        orchestrator = WatchOrchestrator(options.hooks, reporter=ConsoleReporter())
        orchestrator.run(bundler.watch(configs))
    """

    def __init__(
        self,
        hooks: HookCommands,
        *,
        reporter: WatchReporter,
        manager: HookProcessManager | None = None,
        relocate: Callable[[], object] | None = None,
        verbose: bool = False,
    ):
        """
        Args:
            hooks: Hook commands from the normalized options
            reporter: Progress output
            manager: Hook process manager (a fresh one when None)
            relocate: Post-build type declaration relocation step
            verbose: Keep previous output instead of clearing the screen
        """
        self.hooks = hooks
        self.manager = manager or HookProcessManager()
        self.reporter = reporter
        self.verbose = verbose
        self._relocate = relocate
        self._phase = Phase.IDLE
        self._has_seen_first_success = False

    @property
    def state(self) -> WatchCycleState:
        return WatchCycleState(
            phase=self._phase,
            has_seen_first_success=self._has_seen_first_success,
        )

    def run(self, events: Iterable[BundlerEvent]) -> None:
        """
        Consume *events* until the stream ends or the user interrupts.

        Hook processes are terminated and the event source closed on exit.
        """
        try:
            for event in events:
                self.handle(event)
        finally:
            self.manager.terminate_all()
            close = getattr(events, "close", None)
            if callable(close):
                close()

    def handle(self, event: BundlerEvent) -> None:
        if event.code == EventCode.START:
            self._on_start()
        elif self._phase != Phase.COMPILING:
            logger.debug(
                f"Ignoring {event.code} received while {self._phase}",
                extra={"component": "WATCH"},
            )
        elif event.code == EventCode.ERROR:
            self._on_error(event.error)
        elif event.code == EventCode.END:
            self._on_end()

    def _on_start(self) -> None:
        if self._phase == Phase.COMPILING:
            logger.debug("Ignoring START while already compiling", extra={"component": "WATCH"})
            return

        self.manager.terminate(CYCLE_SLOTS)
        if not self.verbose:
            self.reporter.clear()
        self.reporter.compiling()
        self._phase = Phase.COMPILING

    def _on_error(self, error: CompileError | None) -> None:
        self._phase = Phase.FAILED
        self.reporter.failed(error)
        logger.error(
            f"Build failed: {error}" if error else "Build failed",
            extra={"component": "WATCH"},
        )
        self.manager.run(HookSlot.FAILURE, self.hooks.failure)
        self.reporter.watching()

    def _on_end(self) -> None:
        self._phase = Phase.SUCCEEDED
        self.reporter.succeeded()

        if self._relocate is not None:
            try:
                self._relocate()
            except MetadataRelocationError as e:
                # Watch mode keeps going; a one-shot build treats this as fatal
                logger.debug(f"Ignoring relocation failure: {e}", extra={"component": "WATCH"})

        if not self._has_seen_first_success and self.hooks.first_success:
            self._has_seen_first_success = True
            self.manager.run(HookSlot.FIRST_SUCCESS, self.hooks.first_success)
        else:
            self.manager.run(HookSlot.SUCCESS, self.hooks.success)
        self.reporter.watching()
