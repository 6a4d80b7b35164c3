"""
Hook process lifecycle.

Watch mode can run a user command after the first successful build, after
every later success, and after every failure. Each of those is a *slot*
holding at most one live process: before a slot's next command starts, the
previous one is sent SIGTERM. Hook processes inherit stdio and are never
waited on; a slow hook is simply replaced by the next cycle's hook.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import Any

from bundlekit.core.errors import HookSpawnError

logger = logging.getLogger(__name__)

Spawner = Callable[..., Any]


class HookSlot(StrEnum):
    """Named hook slots."""

    FIRST_SUCCESS = "first_success"
    SUCCESS = "success"
    FAILURE = "failure"


def split_command(command: str) -> list[str]:
    """Whitespace tokenization only; no shell quoting."""
    return command.split()


class HookHandle:
    """
    Owned handle for one hook process.

    The underlying process object stays private; callers can only ask
    whether it is still running and request its termination.
    """

    def __init__(self, slot: HookSlot, command: str, process: Any):
        self.slot = slot
        self.command = command
        self._process = process

    def is_live(self) -> bool:
        return self._process.poll() is None

    def terminate(self) -> bool:
        """
        Request termination (SIGTERM).

        Returns:
            True if the signal was delivered, False if the process had
            already exited
        """
        if not self.is_live():
            return False
        try:
            self._process.terminate()
        except ProcessLookupError:
            # Exited between poll() and the signal
            return False
        return True

    def __repr__(self) -> str:
        state = "live" if self.is_live() else "exited"
        return f"HookHandle(slot={self.slot.value!r}, command={self.command!r}, {state})"


class HookProcessManager:
    """
    Starts and terminates hook processes, one per slot.

    Usage:
        hooks = HookProcessManager()
        hooks.run(HookSlot.SUCCESS, "node scripts/notify.js")
        ...
        hooks.terminate_all()
    """

    def __init__(self, spawn: Spawner = subprocess.Popen):
        """
        Args:
            spawn: Popen-compatible callable used to start processes
        """
        self._spawn = spawn
        self._slots: dict[HookSlot, HookHandle | None] = {slot: None for slot in HookSlot}

    def handle(self, slot: HookSlot) -> HookHandle | None:
        return self._slots[slot]

    def run(self, slot: HookSlot, command: str | None) -> HookHandle | None:
        """
        Start *command* in *slot*, terminating the slot's previous process first.

        Returns:
            The new handle, or None if the command is empty or failed to spawn
        """
        if not command or not command.strip():
            return None

        self._terminate_slot(slot)

        try:
            handle = self._start(slot, command)
        except HookSpawnError as e:
            logger.error(str(e), extra={"component": "HOOK"})
            return None

        self._slots[slot] = handle
        logger.info(f"Started {slot.value} hook: {command}", extra={"component": "HOOK"})
        return handle

    def terminate(self, slots: Iterable[HookSlot]) -> None:
        for slot in slots:
            self._terminate_slot(slot)

    def terminate_all(self) -> None:
        self.terminate(HookSlot)

    def _terminate_slot(self, slot: HookSlot) -> None:
        handle = self._slots[slot]
        if handle is None:
            return
        if handle.terminate():
            logger.debug(f"Terminated {slot.value} hook: {handle.command}", extra={"component": "HOOK"})
        self._slots[slot] = None

    def _start(self, slot: HookSlot, command: str) -> HookHandle:
        argv = split_command(command)
        try:
            # stdin/stdout/stderr are inherited so hook output is visible
            process = self._spawn(argv)
        except (OSError, ValueError) as e:
            raise HookSpawnError(
                f"Failed to start {slot.value} hook '{command}': {e}", command=command
            ) from e
        return HookHandle(slot, command, process)
