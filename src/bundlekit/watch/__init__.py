"""Watch-mode state machine and hook process management."""

from .hooks import HookHandle, HookProcessManager, HookSlot, split_command
from .orchestrator import Phase, WatchCycleState, WatchOrchestrator, WatchReporter

__all__ = [
    "HookHandle",
    "HookProcessManager",
    "HookSlot",
    "Phase",
    "WatchCycleState",
    "WatchOrchestrator",
    "WatchReporter",
    "split_command",
]
