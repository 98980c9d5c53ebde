"""pkg-config integration.

Asks pkg-config for the compile and link flags of a package and sorts the
returned tokens into compile flags and link flags:

    compile: -I  -D  -F  -framework  -W (but not -Wl,)
    link:    -L  -l  -Wl,  -framework

Anything else is dropped. A missing pkg-config binary or a failed query is
not an error; it only means no flags are gathered for that package.
"""

import logging
import os
import shlex
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..subprocess_utils import find_executable, safe_run

logger = logging.getLogger(__name__)

DEFAULT_PKG_CONFIG = "pkg-config"

COMPILE_PREFIXES = ("-I", "-D", "-F", "-framework", "-W")
LINK_PREFIXES = ("-L", "-l", "-Wl,", "-framework")


def get_pkg_config_name() -> str:
    """pkg-config binary name, overridable with CXXBUILD_PKG_CONFIG."""
    return os.environ.get("CXXBUILD_PKG_CONFIG") or DEFAULT_PKG_CONFIG


@dataclass
class ClassifiedFlags:
    """Flag tokens sorted by the invocation they belong to."""

    compile_flags: List[str] = field(default_factory=list)
    link_flags: List[str] = field(default_factory=list)


def is_compile_flag(token: str) -> bool:
    return token.startswith(COMPILE_PREFIXES) and not token.startswith("-Wl,")


def is_link_flag(token: str) -> bool:
    return token.startswith(LINK_PREFIXES)


def parse_flag_string(flag_string: str) -> List[str]:
    """Split a flag string, honouring quoted values."""
    try:
        return shlex.split(flag_string)
    except ValueError:
        # Unbalanced quotes: fall back to whitespace splitting
        return flag_string.split()


def classify_flags(flag_string: str) -> ClassifiedFlags:
    """Sort pkg-config output tokens into compile and link flags."""
    classified = ClassifiedFlags()
    for token in parse_flag_string(flag_string):
        compile_flag = is_compile_flag(token)
        link_flag = is_link_flag(token)
        if compile_flag:
            classified.compile_flags.append(token)
        if link_flag:
            classified.link_flags.append(token)
        if not compile_flag and not link_flag:
            logger.debug(f"Dropping unrecognized pkg-config token: {token}")
    return classified


class PkgConfig:
    """Queries package metadata through pkg-config."""

    def __init__(self, executable: Optional[str] = None):
        """Initialize the query tool wrapper.

        Args:
            executable: pkg-config binary (defaults to CXXBUILD_PKG_CONFIG or "pkg-config")
        """
        self.executable = executable or get_pkg_config_name()

    def is_available(self) -> bool:
        return find_executable(self.executable) is not None

    def query(self, packages: Sequence[str]) -> Optional[str]:
        """Return the combined --cflags --libs output for packages.

        Returns:
            The flag string, or None if pkg-config is absent or knows nothing
        """
        if not packages:
            return None
        if not self.is_available():
            logger.debug(f"{self.executable} not found, skipping flag lookup")
            return None

        cmd = [self.executable, "--cflags", "--libs", *[p.lower() for p in packages]]
        try:
            result = safe_run(cmd, capture_output=True, text=True)
        except OSError as e:
            logger.debug(f"Failed to run {self.executable}: {e}")
            return None

        output = (result.stdout or "").strip()
        if result.returncode != 0 or not output:
            logger.debug(f"No pkg-config info for {' '.join(packages)}")
            return None
        return output

    def flags_for(self, packages: Sequence[str]) -> Optional[ClassifiedFlags]:
        output = self.query(packages)
        if output is None:
            return None
        return classify_flags(output)


__all__ = [
    "ClassifiedFlags",
    "PkgConfig",
    "classify_flags",
    "is_compile_flag",
    "is_link_flag",
    "parse_flag_string",
]
