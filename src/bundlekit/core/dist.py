"""
dist/ folder housekeeping: cleaning, the CommonJS entry shim, and moving
type declarations emitted under dist/src up into dist/.
"""

from __future__ import annotations

import logging
import shutil

from .errors import MetadataRelocationError
from .package import safe_package_name
from .paths import ProjectPaths

logger = logging.getLogger(__name__)

CJS_ENTRY_TEMPLATE = """
'use strict'

if (process.env.NODE_ENV === 'production') {{
  module.exports = require('./{name}.cjs.production.min.js')
}} else {{
  module.exports = require('./{name}.cjs.development.js')
}}
"""


def clean_dist_folder(paths: ProjectPaths) -> None:
    """Remove dist/ entirely."""
    if paths.dist_dir.exists():
        logger.debug(f"Removing {paths.dist_dir}")
        shutil.rmtree(paths.dist_dir)


def write_cjs_entry_file(name: str, paths: ProjectPaths, entry_stem: str | None = None) -> None:
    """
    Write dist/index.js, which picks the dev or prod CommonJS build by NODE_ENV.

    With several entries the bundles are named ``<name>.<entry_stem>.cjs.*``;
    pass the stem of the entry the package's ``main`` should load.
    """
    base = safe_package_name(name or ".", paths.root)
    if entry_stem:
        base = f"{base}.{entry_stem}"
    contents = CJS_ENTRY_TEMPLATE.format(name=base)
    paths.dist_dir.mkdir(parents=True, exist_ok=True)
    (paths.dist_dir / "index.js").write_text(contents, encoding="utf-8")


def relocate_type_declarations(paths: ProjectPaths) -> bool:
    """
    Move declarations emitted to dist/src/ into dist/.

    Older project layouts put ``rootDir`` above src/, which makes the
    compiler emit ``dist/src/index.d.ts``. Those files are merged into
    dist/ and dist/src/ is removed.

    Returns:
        True if anything was moved

    Raises:
        MetadataRelocationError: On any filesystem failure
    """
    nested = paths.dist_dir / "src"
    if not nested.is_dir():
        return False

    logger.warning(
        "Type declarations were emitted to dist/src; moving them to dist/. "
        "Set 'rootDir' to './src' in tsconfig.json to avoid this step."
    )
    try:
        shutil.copytree(nested, paths.dist_dir, dirs_exist_ok=True)
        shutil.rmtree(nested)
    except OSError as e:
        raise MetadataRelocationError(f"Failed to move type declarations out of {nested}: {e}") from e
    return True
