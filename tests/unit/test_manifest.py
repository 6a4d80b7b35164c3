"""Unit tests for bundlekit.toml loading."""

from pathlib import Path

import pytest

from bundlekit.core.errors import ConfigError
from bundlekit.core.manifest import DEFAULT_BUNDLER_COMMAND, BundlekitManifest, load_manifest


def test_missing_file_gives_defaults(tmp_path: Path):
    manifest = load_manifest(tmp_path / "bundlekit.toml")

    assert manifest == BundlekitManifest()
    assert manifest.build.format == "cjs,esm"
    assert manifest.watch.include == ["src"]
    assert manifest.bundler.command == DEFAULT_BUNDLER_COMMAND


def test_full_manifest(tmp_path: Path):
    path = tmp_path / "bundlekit.toml"
    path.write_text(
        """
[build]
entry = "src/main.ts"
format = "esm,umd"
target = "node"
name = "Widgets"
clean = false

[watch]
verbose = true
include = ["src", "styles"]
poll_interval = 1

[watch.hooks]
on_first_success = "node dist/index.js"
on_failure = "say failed"

[bundler]
command = "rollup"
plugins = ["@rollup/plugin-node-resolve"]
minify_plugin = "@rollup/plugin-terser"
"""
    )

    manifest = load_manifest(path)

    assert manifest.build.entry == ["src/main.ts"]
    assert manifest.build.format == "esm,umd"
    assert manifest.build.target == "node"
    assert manifest.build.name == "Widgets"
    assert manifest.build.clean is False
    assert manifest.watch.verbose is True
    assert manifest.watch.include == ["src", "styles"]
    assert manifest.watch.poll_interval == 1.0
    assert manifest.watch.hooks.on_first_success == "node dist/index.js"
    assert manifest.watch.hooks.on_success == ""
    assert manifest.watch.hooks.on_failure == "say failed"
    assert manifest.bundler.command == ["rollup"]
    assert manifest.bundler.plugins == ["@rollup/plugin-node-resolve"]
    assert manifest.bundler.minify_plugin == "@rollup/plugin-terser"
    assert manifest.path == path


def test_invalid_toml(tmp_path: Path):
    path = tmp_path / "bundlekit.toml"
    path.write_text("[build\nformat = ")
    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_manifest(path)


@pytest.mark.parametrize(
    "content",
    [
        "build = 3",
        "[build]\nclean = 'yes'",
        "[watch]\npoll_interval = true",
        "[bundler]\nplugins = [1, 2]",
    ],
)
def test_wrong_types(tmp_path: Path, content: str):
    path = tmp_path / "bundlekit.toml"
    path.write_text(content)
    with pytest.raises(ConfigError):
        load_manifest(path)
