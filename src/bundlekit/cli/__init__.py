"""
bundlekit CLI package.

- build.py: one-shot build
- watch.py: watch mode with hooks
- progress.py: spinners and status output
- common.py: option merging shared by both commands
"""

import typer

from bundlekit.cli.build import build_command
from bundlekit.cli.utils import version_callback
from bundlekit.cli.watch import watch_command

app = typer.Typer(
    help="""bundlekit – bundle JavaScript/TypeScript libraries

Commands:
  • build: build every format once and exit
  • watch: rebuild on change, running hook commands after each cycle
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """bundlekit CLI main callback for global options."""
    pass


app.command(name="build")(build_command)
app.command(name="watch")(watch_command)


def main() -> None:
    app(standalone_mode=True)


__all__ = ["app", "main"]
