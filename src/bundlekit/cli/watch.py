"""
bundlekit watch command.

Rebuilds on every change until interrupted. Compile failures are reported
and the session keeps watching; only configuration and entry errors found
before the session starts exit with code 1.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console

from bundlekit.core.configs import create_build_configs, entry_qualifier, load_config_override
from bundlekit.core.dist import clean_dist_folder, relocate_type_declarations, write_cjs_entry_file
from bundlekit.core.errors import ConfigError
from bundlekit.core.logging import setup_logging
from bundlekit.core.options import Format
from bundlekit.watch.hooks import HookProcessManager
from bundlekit.watch.orchestrator import WatchOrchestrator

from .common import create_bundler, fail, load_project, resolve_options
from .progress import ConsoleReporter

logger = logging.getLogger(__name__)

console = Console()


def watch_command(
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
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Keep outdated console output instead of clearing the screen",
    ),
    no_clean: bool = typer.Option(False, "--no-clean", help="Don't clean the dist folder"),
    on_first_success: str | None = typer.Option(
        None, "--on-first-success", help="Command to run after the first successful build"
    ),
    on_success: str | None = typer.Option(
        None, "--on-success", help="Command to run after each later successful build"
    ),
    on_failure: str | None = typer.Option(
        None, "--on-failure", help="Command to run after each failed build"
    ),
    project_dir: Path = typer.Option(Path("."), "--project-dir", "-C", help="Project root"),
    log_file: Path | None = typer.Option(None, "--log-file", help="Write a JSONL log here"),
) -> None:
    """
    Rebuild on any change.

    Hook commands are split on whitespace (no shell quoting). A hook still
    running when the next cycle starts is terminated first.

    Examples:
        bundlekit watch
        bundlekit watch --on-success "node dist/index.js"
        bundlekit watch --verbose --format esm
    """
    setup_logging(level=logging.DEBUG if verbose else None, log_file=log_file)
    paths, manifest = load_project(project_dir)

    options = resolve_options(
        paths,
        manifest,
        entry=entry,
        format=format,
        target=target,
        name=name,
        no_clean=no_clean,
        verbose=verbose,
        on_first_success=on_first_success,
        on_success=on_success,
        on_failure=on_failure,
    )

    try:
        override = load_config_override(paths)
        configs = create_build_configs(options, override=override)
    except ConfigError as e:
        logger.error(str(e))
        fail(f"Error: {e}")

    if options.clean_before_build:
        try:
            clean_dist_folder(paths)
        except OSError as e:
            logger.error(f"Failed to clean {paths.dist_dir}: {e}")
            fail(f"Error: could not clean {paths.dist_dir}: {e}")
    if Format.CJS in options.formats and options.package_name:
        try:
            write_cjs_entry_file(
                options.package_name,
                paths,
                entry_qualifier(options, options.entries[0]),
            )
        except OSError as e:
            logger.error(f"Failed to write dist/index.js: {e}")

    orchestrator = WatchOrchestrator(
        options.hooks,
        manager=HookProcessManager(),
        reporter=ConsoleReporter(console),
        relocate=lambda: relocate_type_declarations(paths),
        verbose=options.verbose,
    )

    bundler = create_bundler(paths, manifest)
    source = bundler.watch(configs)
    try:
        orchestrator.run(source)
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped watching[/dim]")
