"""qmake project file generation.

Writes a ``<name>.pro`` describing the non-test sources so the project can
be opened in Qt Creator or built with qmake. Compilation is not performed.
"""

import logging
from pathlib import Path
from typing import List, Optional

from cxxbuild.build.build_context import BuildConfig
from cxxbuild.build.source_scanner import SourceCollection

logger = logging.getLogger(__name__)

INCLUDE_PATH = ". include ../include ../common"


class QmakeProjectError(Exception):
    """Raised when the project file cannot be written."""
    pass


def render_pro_file(collection: SourceCollection, config: BuildConfig) -> str:
    """Render the .pro file contents for a source collection."""
    sources: List[str] = [s.path.as_posix() for s in collection.non_test_sources]
    lines = [
        "TEMPLATE = app",
        "CONFIG += c++20",
        "CONFIG -= console",
        "CONFIG -= app_bundle",
        "CONFIG -= qt",
        "",
    ]
    if sources:
        lines.append("SOURCES += \\")
        for i, source in enumerate(sources):
            continuation = " \\" if i < len(sources) - 1 else ""
            lines.append(f"  {source}{continuation}")
        lines.append("")
    lines.append(f"INCLUDEPATH += {INCLUDE_PATH}")
    lines.append("")
    if config.compiler:
        lines.append(f"QMAKE_CXX = {config.compiler}")
    cxxflags = [*config.base_flags, *config.mode_flags, *config.extra_compile_flags]
    if cxxflags:
        lines.append(f"QMAKE_CXXFLAGS += {' '.join(cxxflags)}")
    return "\n".join(lines) + "\n"


def pro_file_name(output_name: Optional[str]) -> str:
    base = output_name or "main"
    if base.endswith(".exe"):
        base = base[: -len(".exe")]
    return f"{base}.pro"


def generate_pro_file(
    project_dir: Path,
    collection: SourceCollection,
    config: BuildConfig,
    output_name: Optional[str],
) -> Path:
    """Write the .pro file into project_dir.

    Returns:
        Path of the written file

    Raises:
        QmakeProjectError: If the file cannot be written
    """
    path = project_dir / pro_file_name(output_name)
    try:
        path.write_text(render_pro_file(collection, config), encoding="utf-8")
    except OSError as e:
        raise QmakeProjectError(f"Could not write {path}: {e}") from e
    logger.debug(f"Wrote {path}")
    return path
