"""Well-known project locations, resolved against an explicit working directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

MANIFEST_FILENAME = "bundlekit.toml"
OVERRIDE_FILENAME = "bundlekit_config.py"


@dataclass(frozen=True)
class ProjectPaths:
    """
    Paths of a library project.

    Every path is derived from ``root``; nothing here consults the process
    working directory, so several projects can be handled side by side.
    """

    root: Path

    @classmethod
    def at(cls, working_directory: Path | str) -> ProjectPaths:
        # Resolve symlinks so emitted paths are stable
        return cls(root=Path(working_directory).resolve())

    def resolve(self, *segments: str | Path) -> Path:
        return self.root.joinpath(*segments).resolve()

    @property
    def src_dir(self) -> Path:
        return self.root / "src"

    @property
    def dist_dir(self) -> Path:
        return self.root / "dist"

    @property
    def package_json(self) -> Path:
        return self.root / "package.json"

    @property
    def manifest(self) -> Path:
        return self.root / MANIFEST_FILENAME

    @property
    def override_module(self) -> Path:
        return self.root / OVERRIDE_FILENAME

    @property
    def progress_cache(self) -> Path:
        return self.root / "node_modules" / ".cache" / ".progress-estimator"
