"""Header resolution against the standard library and include search paths.

Every header name ends up in exactly one of four buckets:

    STANDARD  - on the built-in standard library allow-list
    LOCAL     - found under a project-local include directory
    SYSTEM    - found under a system include directory
    MISSING   - none of the above

Search order is allow-list, then local directories, then system directories;
the first hit wins. The question answered is "is this header satisfiable",
not "which file provides it".
"""

import logging
import platform
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

logger = logging.getLogger(__name__)

# C++ standard library headers, plus C library header stems so that both
# <cstdio> (prefix stripped) and <stdio.h> (extension stripped) match.
STANDARD_HEADERS = frozenset(
    {
        # C++
        "algorithm", "any", "array", "atomic", "barrier", "bit", "bitset",
        "charconv", "chrono", "codecvt", "compare", "complex", "concepts",
        "condition_variable", "coroutine", "deque", "exception", "execution",
        "expected", "filesystem", "format", "forward_list", "fstream",
        "functional", "future", "initializer_list", "iomanip", "ios", "iosfwd",
        "iostream", "istream", "iterator", "latch", "limits", "list", "locale",
        "map", "memory", "memory_resource", "mutex", "new", "numbers", "numeric",
        "optional", "ostream", "print", "queue", "random", "ranges", "ratio",
        "regex", "scoped_allocator", "semaphore", "set", "shared_mutex",
        "source_location", "span", "sstream", "stack", "stacktrace", "stdexcept",
        "stop_token", "streambuf", "string", "string_view", "strstream",
        "syncstream", "system_error", "thread", "tuple", "type_traits",
        "typeindex", "typeinfo", "unordered_map", "unordered_set", "utility",
        "valarray", "variant", "vector", "version",
        # C library (<xxx.h> and <cxxx>)
        "assert", "ctype", "errno", "fenv", "float", "inttypes", "iso646",
        "math", "setjmp", "signal", "stdalign", "stdarg", "stdatomic",
        "stdbool", "stddef", "stdint", "stdio", "stdlib", "stdnoreturn",
        "tgmath", "threads", "time", "uchar", "wchar", "wctype",
    }
)

# Directory names searched for project headers, relative to the project root
LOCAL_INCLUDE_DIRS = ("include", ".", "common")
PARENT_INCLUDE_DIRS = ("../include", "../common")

SYSTEM_INCLUDE_DIRS = ("/usr/include", "/usr/local/include")


class HeaderStatus(Enum):
    STANDARD = "standard"
    LOCAL = "local"
    SYSTEM = "system"
    MISSING = "missing"

    def __str__(self) -> str:
        return self.value


def normalize_header_name(header: str) -> str:
    """Lower-cased header name without its extension.

    The directory part is kept, so <sys/time.h> does not look like <time.h>.
    """
    basename = header.rsplit("/", 1)[-1]
    if "." in basename:
        header = header[: header.rindex(".")]
    return header.lower()


def is_standard_header(header: str) -> bool:
    """Check a header against the standard library allow-list.

    Matches the normalized name, or the normalized name with one leading 'c'
    removed (the C++ spelling of a C library header).
    """
    name = normalize_header_name(header)
    if name in STANDARD_HEADERS:
        return True
    return name.startswith("c") and name[1:] in STANDARD_HEADERS


def multiarch_include_dir() -> Optional[Path]:
    """Debian-style multiarch include directory for this machine, if present."""
    machine = platform.machine().lower()
    if not machine:
        return None
    if machine == "amd64":
        machine = "x86_64"
    elif machine == "arm64":
        machine = "aarch64"
    candidate = Path("/usr/include") / f"{machine}-linux-gnu"
    return candidate if candidate.is_dir() else None


def discover_system_include_dirs() -> List[Path]:
    dirs = [Path(d) for d in SYSTEM_INCLUDE_DIRS]
    multiarch = multiarch_include_dir()
    if multiarch is not None:
        dirs.append(multiarch)
    return dirs


def discover_local_include_dirs(project_dir: Path) -> List[Path]:
    """Conventional project include directories that exist on disk."""
    dirs = []
    for name in LOCAL_INCLUDE_DIRS + PARENT_INCLUDE_DIRS:
        candidate = project_dir / name
        if candidate.is_dir():
            dirs.append(candidate)
    return dirs


@dataclass
class ResolutionResult:
    """Outcome of resolving a set of header names."""

    statuses: Dict[str, HeaderStatus] = field(default_factory=dict)

    def with_status(self, status: HeaderStatus) -> List[str]:
        return sorted(h for h, s in self.statuses.items() if s is status)

    @property
    def missing(self) -> List[str]:
        return self.with_status(HeaderStatus.MISSING)

    @property
    def satisfied(self) -> List[str]:
        return sorted(h for h, s in self.statuses.items() if s is not HeaderStatus.MISSING)


class HeaderResolver:
    """Partitions header names into satisfied and missing."""

    def __init__(self, local_dirs: Sequence[Path], system_dirs: Sequence[Path]):
        """Initialize the resolver.

        Args:
            local_dirs: Project include directories, searched first
            system_dirs: System include directories, searched second
        """
        self.local_dirs = list(local_dirs)
        self.system_dirs = list(system_dirs)

    @classmethod
    def for_project(cls, project_dir: Path) -> "HeaderResolver":
        return cls(discover_local_include_dirs(project_dir), discover_system_include_dirs())

    def status_of(self, header: str) -> HeaderStatus:
        if is_standard_header(header):
            return HeaderStatus.STANDARD
        if _found_in(header, self.local_dirs):
            return HeaderStatus.LOCAL
        if _found_in(header, self.system_dirs):
            return HeaderStatus.SYSTEM
        return HeaderStatus.MISSING

    def resolve(self, headers: Iterable[str]) -> ResolutionResult:
        result = ResolutionResult()
        for header in set(headers):
            status = self.status_of(header)
            result.statuses[header] = status
            logger.debug(f"Header <{header}>: {status}")
        return result


def _found_in(header: str, dirs: Sequence[Path]) -> bool:
    return any((d / header).is_file() for d in dirs)
