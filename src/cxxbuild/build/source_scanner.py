"""Source File Scanner.

This module discovers and classifies the translation units of a project.

Discovery:
    - Walk the project directory recursively, in directory-walk order
    - Skip hidden directories (names starting with '.')
    - Keep files with a C or C++ source extension (.c, .cc, .cpp, .cxx)

Classification (in priority order):
    1. ``*_test.<ext>`` or ``test.<ext>`` (case-insensitive) -> test
    2. ``main.<ext>`` (case-insensitive) -> entry point
    3. Exactly one non-test source -> that source is the entry point
    4. First non-test source whose text contains ``main(`` -> entry point
    5. Everything else -> normal

Paths in the resulting SourceCollection are relative to the project root.
"""

import logging
import os
import re
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = (".c", ".cc", ".cpp", ".cxx")

# "int main(", "auto main(" and friends; main( must follow whitespace or start a line
_ENTRY_SIGNATURE = re.compile(r"(?:^|\s)main\s*\(", re.MULTILINE)


class SourceDiscoveryError(Exception):
    """Raised when the project tree cannot be walked."""
    pass


class SourceKind(Enum):
    """Role of a translation unit within one build run."""

    ENTRY_POINT = "entry_point"
    TEST = "test"
    NORMAL = "normal"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SourceFile:
    """A classified source file, path relative to the project root."""

    path: Path
    kind: SourceKind

    @property
    def is_test(self) -> bool:
        return self.kind is SourceKind.TEST

    @property
    def object_path(self) -> Path:
        """Object artifact compiled from this source, kept beside it.

        The full file name is kept (util.cpp -> util.cpp.o) so util.c and
        util.cpp in one directory get distinct objects.
        """
        return self.path.with_name(self.path.name + ".o")

    @property
    def cache_key(self) -> str:
        return self.path.as_posix()


@dataclass
class SourceCollection:
    """All classified sources of one build run, in discovery order."""

    project_dir: Path
    sources: List[SourceFile] = field(default_factory=list)

    @property
    def entry_point(self) -> Optional[SourceFile]:
        for source in self.sources:
            if source.kind is SourceKind.ENTRY_POINT:
                return source
        return None

    @property
    def test_sources(self) -> List[SourceFile]:
        return [s for s in self.sources if s.kind is SourceKind.TEST]

    @property
    def normal_sources(self) -> List[SourceFile]:
        return [s for s in self.sources if s.kind is SourceKind.NORMAL]

    @property
    def non_test_sources(self) -> List[SourceFile]:
        """Entry point and normal sources, in discovery order."""
        return [s for s in self.sources if not s.is_test]

    def __len__(self) -> int:
        return len(self.sources)

    def __bool__(self) -> bool:
        return bool(self.sources)


def is_source_file(path: Path) -> bool:
    return path.name.lower().endswith(SOURCE_EXTENSIONS)


def is_test_source(path: Path) -> bool:
    """Check whether a file name follows the test naming convention."""
    name = path.name.lower()
    for ext in SOURCE_EXTENSIONS:
        if name == f"test{ext}" or name.endswith(f"_test{ext}"):
            return True
    return False


def is_main_named(path: Path) -> bool:
    return path.name.lower() in {f"main{ext}" for ext in SOURCE_EXTENSIONS}


def has_entry_signature(path: Path) -> bool:
    """Check whether a source file defines the program entry function."""
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"Could not read {path} while looking for main(): {e}")
        return False
    return _ENTRY_SIGNATURE.search(text) is not None


class SourceScanner:
    """Discovers and classifies C/C++ sources under a project directory."""

    def __init__(self, project_dir: Path):
        """Initialize the scanner.

        Args:
            project_dir: Project root directory
        """
        self.project_dir = project_dir

    def discover(self) -> List[Path]:
        """Walk the project tree and return candidate sources in walk order.

        Returns:
            Source paths relative to the project root

        Raises:
            SourceDiscoveryError: If the project directory cannot be walked
        """
        if not self.project_dir.is_dir():
            raise SourceDiscoveryError(f"Project directory not found: {self.project_dir}")

        def _on_error(error: OSError) -> None:
            raise SourceDiscoveryError(f"Failed to read directory {error.filename}: {error}")

        found: List[Path] = []
        try:
            for root, dirs, files in os.walk(self.project_dir, onerror=_on_error):
                # Prune hidden directories in place so os.walk never descends
                dirs[:] = sorted(d for d in dirs if not d.startswith("."))
                root_path = Path(root)
                for name in sorted(files):
                    path = root_path / name
                    if is_source_file(path):
                        found.append(path.relative_to(self.project_dir))
        except OSError as e:
            raise SourceDiscoveryError(f"Failed to walk {self.project_dir}: {e}") from e

        logger.debug(f"Discovered {len(found)} source files under {self.project_dir}")
        return found

    def classify(self, paths: List[Path]) -> SourceCollection:
        """Tag each path as test, entry point or normal.

        Args:
            paths: Source paths relative to the project root, in walk order

        Returns:
            SourceCollection with at most one entry point
        """
        non_test = [p for p in paths if not is_test_source(p)]
        entry = self._find_entry_point(non_test)

        collection = SourceCollection(project_dir=self.project_dir)
        for path in paths:
            if is_test_source(path):
                kind = SourceKind.TEST
            elif path == entry:
                kind = SourceKind.ENTRY_POINT
            else:
                kind = SourceKind.NORMAL
            collection.sources.append(SourceFile(path=path, kind=kind))
        return collection

    def scan(self) -> SourceCollection:
        """Discover and classify all sources of the project."""
        return self.classify(self.discover())

    def _find_entry_point(self, non_test: List[Path]) -> Optional[Path]:
        for path in non_test:
            if is_main_named(path):
                return path

        if len(non_test) == 1:
            return non_test[0]

        for path in non_test:
            if has_entry_signature(self.project_dir / path):
                return path

        return None


def executable_suffix(cross_compile: bool) -> str:
    """Suffix for produced executables: .exe for Windows targets."""
    if cross_compile or sys.platform == "win32":
        return ".exe"
    return ""


def ensure_exe_suffix(name: str, cross_compile: bool) -> str:
    suffix = executable_suffix(cross_compile)
    if suffix and not name.endswith(suffix):
        return name + suffix
    return name


def guess_output_name(collection: SourceCollection, cross_compile: bool) -> Optional[str]:
    """Name of the final artifact for a source collection.

    The entry point's base name without extension; "main" when there are
    non-test sources but no entry point; None when there is nothing to link.
    """
    entry = collection.entry_point
    if entry is not None:
        base = entry.path.stem or "main"
    elif collection.non_test_sources:
        base = "main"
    else:
        return None
    return ensure_exe_suffix(base, cross_compile)
