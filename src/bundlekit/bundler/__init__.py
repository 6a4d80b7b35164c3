"""Bundler adapters and their watch-mode event sources."""

from .base import BundlerAdapter, BundlerEvent, EventCode, EventSource
from .rollup import RollupBundler
from .watcher import FileWatcher, PollingEventSource

__all__ = [
    "BundlerAdapter",
    "BundlerEvent",
    "EventCode",
    "EventSource",
    "FileWatcher",
    "PollingEventSource",
    "RollupBundler",
]
