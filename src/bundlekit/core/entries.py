"""
Entry module resolution.

Resolution order:
1. Explicit entries (paths or glob patterns) when given
2. The ``source`` hint from package.json
3. ``src/index`` with the first existing extension of .ts, .tsx, .jsx,
   defaulting to .js

Every candidate is expanded as a glob relative to the working directory,
so a candidate that matches nothing contributes nothing.
"""

from __future__ import annotations

import glob
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from .errors import NoEntryFoundError

logger = logging.getLogger(__name__)

# Probed in order; .js is the fallback and is not probed
INDEX_EXTENSIONS = (".ts", ".tsx", ".jsx")
DEFAULT_EXTENSION = ".js"


def resolve_file(stem: str, working_directory: Path) -> Path:
    """
    Pick an extension for *stem* (e.g. ``src/index``).

    Returns the first of ``stem.ts``, ``stem.tsx``, ``stem.jsx`` that is an
    existing file, otherwise ``stem.js`` without checking it exists.
    """
    for ext in INDEX_EXTENSIONS:
        candidate = working_directory / f"{stem}{ext}"
        if candidate.is_file():
            return candidate.resolve()
    return (working_directory / f"{stem}{DEFAULT_EXTENSION}").resolve()


def expand_pattern(pattern: str, working_directory: Path) -> list[Path]:
    """Expand one glob pattern, keeping the filesystem's traversal order."""
    if Path(pattern).is_absolute():
        matches = glob.glob(pattern, recursive=True)
        return [Path(m).resolve() for m in matches if Path(m).is_file()]

    matches = glob.glob(pattern, root_dir=working_directory, recursive=True)
    found: list[Path] = []
    for match in matches:
        path = working_directory / match
        if path.is_file():
            found.append(path.resolve())
    return found


def _default_candidates(source_hint: str | None, working_directory: Path) -> list[str]:
    if source_hint:
        return [source_hint]
    if (working_directory / "src").is_dir():
        # Already a concrete path; glob characters in the project path are literal
        return [glob.escape(str(resolve_file("src/index", working_directory)))]
    return []


def _dedupe(paths: Iterable[Path]) -> tuple[Path, ...]:
    return tuple(dict.fromkeys(paths))


def resolve_entries(
    explicit_entries: Sequence[str],
    source_hint: str | None,
    working_directory: Path,
) -> tuple[Path, ...]:
    """
    Resolve entry specifications into absolute file paths.

    Args:
        explicit_entries: Paths or glob patterns from --entry / bundlekit.toml
        source_hint: ``source`` from package.json, if any
        working_directory: Directory relative patterns are resolved against

    Returns:
        Deduplicated absolute paths (non-empty)

    Raises:
        NoEntryFoundError: If nothing resolves to an existing file
    """
    working_directory = working_directory.resolve()
    candidates = [e for e in explicit_entries if e]
    if not candidates:
        candidates = _default_candidates(source_hint, working_directory)

    if not candidates:
        raise NoEntryFoundError(
            f"No entry module found in {working_directory}: pass --entry, "
            "set 'source' in package.json, or create src/index.ts"
        )

    resolved: list[Path] = []
    for pattern in candidates:
        matches = expand_pattern(pattern, working_directory)
        if not matches:
            logger.warning(f"Entry pattern '{pattern}' matched no files")
        resolved.extend(matches)

    entries = _dedupe(resolved)
    if not entries:
        raise NoEntryFoundError(
            f"No entry module found: {', '.join(candidates)} matched no files "
            f"in {working_directory}"
        )

    logger.debug(f"Resolved {len(entries)} entry module(s)")
    return entries
