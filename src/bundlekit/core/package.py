"""
package.json access and package-name helpers.

Only the fields bundlekit cares about are read: ``name`` (default UMD
global and output file base) and ``source`` (conventional entry hint).
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from .paths import ProjectPaths

logger = logging.getLogger(__name__)

_SCOPE_RE = re.compile(r"^@.*/")
_UNSAFE_RE = re.compile(r"((^[^a-zA-Z]+)|[^\w.-])|([^a-zA-Z0-9]+$)")


@dataclass(frozen=True)
class PackageInfo:
    """The subset of package.json used when building."""

    name: str = ""
    source: str | None = None


def load_package_info(paths: ProjectPaths) -> PackageInfo:
    """
    Read package.json from the project root.

    A missing or unparsable file yields an empty PackageInfo rather than an
    error; the CLI can still build when entries and --name are explicit.
    """
    try:
        data = json.loads(paths.package_json.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return PackageInfo()
    except (OSError, ValueError) as e:
        logger.debug(f"Ignoring unreadable {paths.package_json}: {e}")
        return PackageInfo()

    if not isinstance(data, dict):
        return PackageInfo()

    name = data.get("name")
    source = data.get("source")
    return PackageInfo(
        name=name if isinstance(name, str) else "",
        source=source if isinstance(source, str) and source else None,
    )


def remove_scope(name: str) -> str:
    """Strip an npm scope: ``@org/pkg`` -> ``pkg``."""
    return _SCOPE_RE.sub("", name)


def safe_package_name(name: str, root: Path | None = None) -> str:
    """
    Filesystem-safe package name used as the base of output file names.

    ``"."`` stands for the project directory itself and maps to its name.
    """
    if name == ".":
        return (root or Path(".")).resolve().name
    return _UNSAFE_RE.sub("", remove_scope(name).lower())


def safe_variable_name(name: str) -> str:
    """
    UMD-safe global variable name: scope removed, then camelCased.

    ``@org/my-lib`` -> ``myLib``
    """
    cleaned = _UNSAFE_RE.sub("", remove_scope(name).lower())
    words = [w for w in re.split(r"[^a-zA-Z0-9]+", cleaned) if w]
    if not words:
        return ""
    return words[0] + "".join(w[:1].upper() + w[1:] for w in words[1:])
