"""Include directive scanner.

Extracts the header names a translation unit includes directly. This is a
line-based, single-pass regex scan, not a preprocessor: line continuations,
block comments and conditional compilation are not understood, so an include
inside ``#if 0`` or a comment is reported like any other. Headers included by
headers are not followed.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, List, Set

logger = logging.getLogger(__name__)

# Optional indentation, '#', optional spaces, 'include', then "name" or <name>
INCLUDE_PATTERN = re.compile(r'^\s*#\s*include\s*["<]([^">]+)[">]')


def scan_text(text: str) -> List[str]:
    """Return the header names included by source text, in line order.

    Only the first include token of each line is captured. Duplicates are
    kept; callers that need a set collapse them.
    """
    headers = []
    for line in text.splitlines():
        match = INCLUDE_PATTERN.match(line)
        if match:
            headers.append(match.group(1))
    return headers


def scan_file(path: Path) -> List[str]:
    """Return the header names included by a source file.

    An unreadable file contributes no headers.
    """
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"Skipping unreadable source {path}: {e}")
        return []
    return scan_text(text)


def gather_includes(paths: Iterable[Path]) -> Set[str]:
    """Aggregate the directly included headers of many sources into one set."""
    headers: Set[str] = set()
    for path in paths:
        headers.update(scan_file(path))
    logger.debug(f"Found {len(headers)} distinct included headers")
    return headers
