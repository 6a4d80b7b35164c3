"""
bundlekit CLI utilities.

Version reporting shared by the main callback.
"""

import platform
import shutil

import typer

from bundlekit._version import get_version


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        python_version = platform.python_version()
        python_impl = platform.python_implementation()

        typer.echo(f"bundlekit version {get_version()}")
        typer.echo("")
        typer.echo("Environment:")
        typer.echo(f"  Python:        {python_impl} {python_version}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")

        node = shutil.which("node")
        npx = shutil.which("npx")
        typer.echo("")
        typer.echo("Toolchain:")
        typer.echo(f"  node:          {node or '✗ not found'}")
        typer.echo(f"  npx:           {npx or '✗ not found'}")

        raise typer.Exit()
