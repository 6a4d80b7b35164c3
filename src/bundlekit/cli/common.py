"""Shared CLI helpers for the build and watch commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import typer

from bundlekit.bundler.rollup import RollupBundler
from bundlekit.core.errors import BundlekitError
from bundlekit.core.manifest import BundlekitManifest, load_manifest
from bundlekit.core.options import NormalizedOptions, normalize_options
from bundlekit.core.paths import ProjectPaths

logger = logging.getLogger(__name__)


def fail(message: str) -> NoReturn:
    """Print *message* to stderr and exit with code 1."""
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


def load_project(project_dir: Path) -> tuple[ProjectPaths, BundlekitManifest]:
    """
    Resolve the project root and load its bundlekit.toml.

    Exits with code 1 if the directory does not exist or the manifest is invalid.
    """
    if not project_dir.is_dir():
        fail(f"Project directory not found: {project_dir}")

    paths = ProjectPaths.at(project_dir)
    try:
        manifest = load_manifest(paths.manifest)
    except BundlekitError as e:
        fail(f"Error loading {paths.manifest.name}: {e}")
    return paths, manifest


def resolve_options(
    paths: ProjectPaths,
    manifest: BundlekitManifest,
    *,
    entry: list[str] | None,
    format: str | None,
    target: str | None,
    name: str | None,
    no_clean: bool,
    verbose: bool = False,
    on_first_success: str | None = None,
    on_success: str | None = None,
    on_failure: str | None = None,
) -> NormalizedOptions:
    """
    Merge CLI flags over bundlekit.toml and normalize.

    Flags that were not given fall back to the manifest, which falls back
    to built-in defaults. Exits with code 1 on configuration or entry errors.
    """
    hooks = manifest.watch.hooks
    try:
        return normalize_options(
            working_directory=paths.root,
            entry=entry or manifest.build.entry,
            format=format or manifest.build.format,
            target=target or manifest.build.target,
            name=name or manifest.build.name,
            clean=manifest.build.clean and not no_clean,
            verbose=verbose or manifest.watch.verbose,
            on_first_success=on_first_success or hooks.on_first_success,
            on_success=on_success or hooks.on_success,
            on_failure=on_failure or hooks.on_failure,
        )
    except BundlekitError as e:
        logger.error(str(e))
        fail(f"Error: {e}")


def create_bundler(paths: ProjectPaths, manifest: BundlekitManifest) -> RollupBundler:
    return RollupBundler(
        paths,
        manifest.bundler,
        include=manifest.watch.include,
        poll_interval=manifest.watch.poll_interval,
    )
