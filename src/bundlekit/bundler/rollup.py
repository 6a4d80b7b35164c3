"""
Rollup command-line backend.

Each UnitConfig becomes one ``rollup`` invocation. Watch mode does not use
``rollup --watch``; a PollingEventSource re-runs the full set of unit
builds whenever a watched source file changes, which keeps event ordering
under bundlekit's control.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from bundlekit.core.configs import FORMATS_BY_BUNDLER_NAME, UnitConfig
from bundlekit.core.errors import BuildContext, CompileError
from bundlekit.core.manifest import BundlerSection
from bundlekit.core.options import Environment
from bundlekit.core.paths import ProjectPaths

from .watcher import DEFAULT_PATTERNS, PollingEventSource

logger = logging.getLogger(__name__)

# Formats that expose a global and therefore need --name
NAMED_FORMATS = {"umd", "system", "iife"}

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


class RollupBundler:
    """
    BundlerAdapter backed by the ``rollup`` CLI.

    Usage:
        bundler = RollupBundler(ProjectPaths.at("."), manifest.bundler)
        bundler.build(config)
    """

    def __init__(
        self,
        paths: ProjectPaths,
        settings: BundlerSection | None = None,
        *,
        include: Sequence[str] = ("src",),
        patterns: Sequence[str] = DEFAULT_PATTERNS,
        poll_interval: float = 0.5,
        runner: Runner = subprocess.run,
    ):
        """
        Args:
            paths: Project paths; rollup runs with the project root as cwd
            settings: [bundler] section (command, plugins, minify plugin)
            include: Directories/files watched in watch mode
            patterns: File patterns watched inside ``include`` directories
            poll_interval: Seconds between watch polls
            runner: subprocess.run-compatible callable
        """
        self.paths = paths
        self.settings = settings or BundlerSection()
        self.include = list(include)
        self.patterns = list(patterns)
        self.poll_interval = poll_interval
        self._runner = runner

    def command_for(self, config: UnitConfig) -> list[str]:
        """Full argv for building *config*."""
        args = [
            *self.settings.command,
            "--input",
            str(config.input),
            "--file",
            str(config.output_file),
            "--format",
            config.format,
        ]
        if config.format in NAMED_FORMATS and config.name:
            args += ["--name", config.name]
        if config.sourcemap:
            args.append("--sourcemap")

        env_vars = [f"BUNDLEKIT_TARGET:{config.target.value}"]
        if config.environment != Environment.NONE:
            env_vars.insert(0, f"NODE_ENV:{config.environment.value}")
        args += ["--environment", ",".join(env_vars)]

        plugins = list(self.settings.plugins)
        if config.minify and self.settings.minify_plugin:
            plugins.append(self.settings.minify_plugin)
        for plugin in plugins:
            args += ["--plugin", plugin]

        extra_args: Any = config.extra.get("args", [])
        args += [str(a) for a in extra_args]
        args.append("--silent")
        return args

    def build(self, config: UnitConfig) -> list[Path]:
        """Run rollup for one unit; returns the written bundle (and its sourcemap)."""
        context = BuildContext(
            entry=config.input,
            module_format=str(FORMATS_BY_BUNDLER_NAME.get(config.format, config.format)),
            environment=config.environment.value,
        )
        argv = self.command_for(config)
        logger.debug(f"Running: {' '.join(argv)}", extra={"component": "BUNDLER"})

        try:
            result = self._runner(
                argv,
                cwd=self.paths.root,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise CompileError(
                f"Could not run bundler '{argv[0]}': {e}",
                context=context,
            ) from e

        if result.returncode != 0:
            diagnostic = (result.stderr or "").strip() or (result.stdout or "").strip()
            raise CompileError(
                f"Bundler exited with code {result.returncode}",
                diagnostic=diagnostic,
                context=context,
            )

        artifacts = [config.output_file]
        if config.sourcemap:
            artifacts.append(config.output_file.with_name(config.output_file.name + ".map"))
        return artifacts

    def watch(self, configs: Sequence[UnitConfig]) -> PollingEventSource:
        """Watch the include paths and rebuild every config on change."""
        configs = list(configs)

        def build_all() -> None:
            for config in configs:
                self.build(config)

        source = PollingEventSource(
            build_all,
            watch_paths=[self.paths.root / p for p in self.include],
            patterns=self.patterns,
            poll_interval=self.poll_interval,
        )
        source.start()
        return source
