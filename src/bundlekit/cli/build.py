"""
bundlekit build command.

Builds every unit of the matrix once and exits. Any bundler failure, or a
failure to relocate type declarations afterwards, exits with code 1.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import typer
from rich.console import Console

from bundlekit.bundler.base import BundlerAdapter
from bundlekit.core.configs import (
    UnitConfig,
    create_build_configs,
    entry_qualifier,
    load_config_override,
)
from bundlekit.core.dist import clean_dist_folder, relocate_type_declarations, write_cjs_entry_file
from bundlekit.core.errors import BundlekitError, CompileError, ConfigError
from bundlekit.core.logging import setup_logging
from bundlekit.core.matrix import BuildUnit, build_matrix
from bundlekit.core.options import Format
from bundlekit.core.paths import ProjectPaths

from .common import create_bundler, fail, load_project, resolve_options
from .progress import ProgressEstimator

logger = logging.getLogger(__name__)

console = Console()


def build_units(
    bundler: BundlerAdapter,
    units: Sequence[BuildUnit],
    configs: Sequence[UnitConfig],
    max_workers: int | None = None,
) -> list[Path]:
    """
    Build all units concurrently.

    Returns:
        Artifacts in unit order

    Raises:
        CompileError: The first failure in unit order, tagged with its unit
    """
    if not configs:
        return []
    workers = max_workers or min(len(configs), os.cpu_count() or 4)

    artifacts: list[Path] = []
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(bundler.build, config) for config in configs]
        for unit, future in zip(units, futures, strict=True):
            try:
                artifacts.extend(future.result())
            except CompileError as e:
                if e.unit is not None or e.context is not None:
                    raise
                raise CompileError(e.message, diagnostic=e.diagnostic, unit=unit) from e
    return artifacts


def run_build(
    paths: ProjectPaths,
    bundler: BundlerAdapter,
    units: Sequence[BuildUnit],
    configs: Sequence[UnitConfig],
    estimator: ProgressEstimator,
) -> list[Path]:
    """Build every unit, then move type declarations into place."""

    def task() -> list[Path]:
        artifacts = build_units(bundler, units, configs)
        relocate_type_declarations(paths)
        return artifacts

    return estimator.track("Building modules", task)


def build_command(
    entry: list[str] | None = typer.Option(
        None, "--entry", "-e", help="Entry module or glob (repeatable)"
    ),
    target: str | None = typer.Option(
        None, "--target", help="Target environment: 'browser' (default) or 'node'"
    ),
    name: str | None = typer.Option(
        None, "--name", help="Name exposed in UMD builds (default: package.json name)"
    ),
    format: str | None = typer.Option(
        None, "--format", help="Module format(s), comma separated: cjs,esm,umd,system"
    ),
    no_clean: bool = typer.Option(False, "--no-clean", help="Don't clean the dist folder"),
    project_dir: Path = typer.Option(Path("."), "--project-dir", "-C", help="Project root"),
    log_file: Path | None = typer.Option(None, "--log-file", help="Write a JSONL log here"),
) -> None:
    """
    Build your project once and exit.

    Examples:
        bundlekit build                          # cjs + esm from src/index.ts
        bundlekit build --format cjs,esm,umd     # also a UMD bundle
        bundlekit build -e src/a.ts -e src/b.ts  # several entries
    """
    setup_logging(log_file=log_file)
    paths, manifest = load_project(project_dir)

    options = resolve_options(
        paths,
        manifest,
        entry=entry,
        format=format,
        target=target,
        name=name,
        no_clean=no_clean,
    )

    try:
        override = load_config_override(paths)
        units = build_matrix(options)
        configs = create_build_configs(options, units, override)
    except ConfigError as e:
        logger.error(str(e))
        fail(f"Error: {e}")

    if options.clean_before_build:
        try:
            clean_dist_folder(paths)
        except OSError as e:
            logger.error(f"Failed to clean {paths.dist_dir}: {e}")
            fail(f"Error: could not clean {paths.dist_dir}: {e}")

    estimator = ProgressEstimator(paths.progress_cache, console=console)

    if Format.CJS in options.formats:
        try:
            estimator.track(
                "Creating entry file",
                lambda: write_cjs_entry_file(
                    options.package_name,
                    paths,
                    entry_qualifier(options, options.entries[0]),
                ),
            )
        except OSError as e:
            logger.error(f"Failed to write dist/index.js: {e}")

    bundler = create_bundler(paths, manifest)
    try:
        artifacts = run_build(paths, bundler, units, configs, estimator)
    except BundlekitError as e:
        console.print("[bold red]✖ Build failed[/bold red]")
        logger.error(str(e))
        fail(f"Error: {e}")

    typer.echo(f"Built {len(units)} unit(s), {len(artifacts)} file(s) in {paths.dist_dir}")
