"""Clean command implementation.

Removes build artifacts from a project directory: object files anywhere in
the tree (hidden directories skipped), the final executable and the compile
cache file. Every removal is announced.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from cxxbuild.output import log, log_warning

logger = logging.getLogger(__name__)

OBJECT_SUFFIXES = (".o", ".obj")


def find_object_files(project_dir: Path) -> List[Path]:
    """Find object files under project_dir, skipping hidden directories."""
    objects: List[Path] = []
    for root, dirs, files in os.walk(project_dir):
        dirs[:] = sorted(d for d in dirs if not d.startswith("."))
        for name in sorted(files):
            if name.lower().endswith(OBJECT_SUFFIXES):
                objects.append(Path(root) / name)
    return objects


def _remove(path: Path, project_dir: Path) -> bool:
    try:
        display = path.relative_to(project_dir)
    except ValueError:
        display = path
    log(f"Removing {display}")
    try:
        path.unlink()
        return True
    except OSError as e:
        log_warning(f"Could not remove {display}: {e}")
        return False


def clean_artifacts(project_dir: Path, output_name: Optional[str], cache_file: Path) -> List[Path]:
    """Delete object files, the output executable and the cache file.

    Args:
        project_dir: Project root directory
        output_name: Final executable name, if one is known
        cache_file: Compile cache file

    Returns:
        Paths that were removed
    """
    removed: List[Path] = []
    for obj in find_object_files(project_dir):
        if _remove(obj, project_dir):
            removed.append(obj)

    if output_name:
        output = project_dir / output_name
        if output.is_file() and _remove(output, project_dir):
            removed.append(output)

    if cache_file.is_file() and _remove(cache_file, project_dir):
        removed.append(cache_file)

    logger.debug(f"Removed {len(removed)} artifacts from {project_dir}")
    return removed
