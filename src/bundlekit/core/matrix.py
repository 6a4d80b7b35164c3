"""
Build matrix expansion.

Turns NormalizedOptions into the ordered list of BuildUnits handed to the
bundler: entries outer, formats inner in the order they were given, and
development before production for every format except esm.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, model_validator

from .options import Environment, Format, NormalizedOptions

# esm is published unminified and environment-agnostic
SPLIT_ENVIRONMENTS = (Environment.DEVELOPMENT, Environment.PRODUCTION)


class BuildUnit(BaseModel):
    """One bundler invocation: an entry compiled to one format/environment."""

    model_config = ConfigDict(frozen=True)

    entry: Path
    format: Format
    environment: Environment
    write_meta: bool = False

    @model_validator(mode="after")
    def _environment_matches_format(self) -> BuildUnit:
        if (self.format == Format.ESM) != (self.environment == Environment.NONE):
            raise ValueError(
                f"{self.format} units cannot use environment '{self.environment}'"
            )
        return self

    @property
    def label(self) -> str:
        return f"{self.entry.name} [{self.format}/{self.environment}]"


def format_environments(fmt: Format) -> tuple[Environment, ...]:
    if fmt == Format.ESM:
        return (Environment.NONE,)
    return SPLIT_ENVIRONMENTS


def build_matrix(options: NormalizedOptions) -> list[BuildUnit]:
    """
    Expand options into build units.

    The result depends only on ``options.entries`` and ``options.formats``;
    no filesystem access happens here.
    """
    pairs = [(fmt, env) for fmt in options.formats for env in format_environments(fmt)]

    units: list[BuildUnit] = []
    for entry in options.entries:
        for index, (fmt, env) in enumerate(pairs):
            units.append(
                BuildUnit(
                    entry=entry,
                    format=fmt,
                    environment=env,
                    write_meta=index == 0,
                )
            )
    return units
