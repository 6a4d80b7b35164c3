"""
Project manifest (``bundlekit.toml``) loading.

Every section is optional. Values here are defaults for the CLI; flags
passed on the command line always win.

Example bundlekit.toml:

    [build]
    entry = ["src/index.ts"]
    format = "cjs,esm,umd"
    target = "browser"
    name = "my-lib"
    clean = true

    [watch]
    verbose = false
    include = ["src"]
    poll_interval = 0.5

    [watch.hooks]
    on_first_success = "node scripts/serve.js"
    on_success = "node scripts/notify.js"
    on_failure = "say failed"

    [bundler]
    command = ["npx", "--no-install", "rollup"]
    plugins = ["@rollup/plugin-node-resolve"]
    minify_plugin = "@rollup/plugin-terser"
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError

DEFAULT_BUNDLER_COMMAND = ["npx", "--no-install", "rollup"]


@dataclass
class BuildSection:
    """[build] defaults."""

    entry: list[str] = field(default_factory=list)
    format: str = "cjs,esm"
    target: str = "browser"
    name: str = ""
    clean: bool = True


@dataclass
class HookSection:
    """[watch.hooks] commands."""

    on_first_success: str = ""
    on_success: str = ""
    on_failure: str = ""


@dataclass
class WatchSection:
    """[watch] settings."""

    verbose: bool = False
    include: list[str] = field(default_factory=lambda: ["src"])
    poll_interval: float = 0.5
    hooks: HookSection = field(default_factory=HookSection)


@dataclass
class BundlerSection:
    """[bundler] settings for the rollup command-line backend."""

    command: list[str] = field(default_factory=lambda: list(DEFAULT_BUNDLER_COMMAND))
    plugins: list[str] = field(default_factory=list)
    minify_plugin: str = ""


@dataclass
class BundlekitManifest:
    """Parsed bundlekit.toml."""

    build: BuildSection = field(default_factory=BuildSection)
    watch: WatchSection = field(default_factory=WatchSection)
    bundler: BundlerSection = field(default_factory=BundlerSection)
    path: Path | None = None


def load_manifest(path: Path) -> BundlekitManifest:
    """
    Load bundlekit.toml.

    Args:
        path: Path to the manifest file

    Returns:
        BundlekitManifest with values from file, or defaults if it is missing

    Raises:
        ConfigError: If the file is not valid TOML or a value has the wrong type
    """
    if not path.exists():
        return BundlekitManifest()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    build_data = _section(data, "build", path)
    watch_data = _section(data, "watch", path)
    hooks_data = _section(watch_data, "hooks", path)
    bundler_data = _section(data, "bundler", path)

    entry = build_data.get("entry", [])
    if isinstance(entry, str):
        entry = [entry]

    command = bundler_data.get("command", DEFAULT_BUNDLER_COMMAND)
    if isinstance(command, str):
        command = command.split()

    return BundlekitManifest(
        build=BuildSection(
            entry=_str_list(entry, "build.entry", path),
            format=_typed(build_data, "format", str, "cjs,esm", path),
            target=_typed(build_data, "target", str, "browser", path),
            name=_typed(build_data, "name", str, "", path),
            clean=_typed(build_data, "clean", bool, True, path),
        ),
        watch=WatchSection(
            verbose=_typed(watch_data, "verbose", bool, False, path),
            include=_str_list(watch_data.get("include", ["src"]), "watch.include", path),
            poll_interval=float(_typed(watch_data, "poll_interval", (int, float), 0.5, path)),
            hooks=HookSection(
                on_first_success=_typed(hooks_data, "on_first_success", str, "", path),
                on_success=_typed(hooks_data, "on_success", str, "", path),
                on_failure=_typed(hooks_data, "on_failure", str, "", path),
            ),
        ),
        bundler=BundlerSection(
            command=_str_list(command, "bundler.command", path),
            plugins=_str_list(bundler_data.get("plugins", []), "bundler.plugins", path),
            minify_plugin=_typed(bundler_data, "minify_plugin", str, "", path),
        ),
        path=path,
    )


def _section(data: dict[str, Any], key: str, path: Path) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"[{key}] in {path} must be a table")
    return value


def _typed(
    data: dict[str, Any],
    key: str,
    expected: type | tuple[type, ...],
    default: Any,
    path: Path,
) -> Any:
    value = data.get(key, default)
    # bool is an int subclass; keep numeric settings honest
    if isinstance(value, bool) and expected is not bool:
        raise ConfigError(f"'{key}' in {path} has the wrong type")
    if not isinstance(value, expected):
        raise ConfigError(f"'{key}' in {path} has the wrong type")
    return value


def _str_list(value: Any, key: str, path: Path) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' in {path} must be a list of strings")
    return list(value)
