"""Host platform identity and package-manager family detection.

On Linux the identity comes from /etc/os-release: PRETTY_NAME for display,
ID and ID_LIKE for the family. Elsewhere (or without os-release) the OS name
is used and the family is UNKNOWN.
"""

import logging
import platform
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

OS_RELEASE_FILE = Path("/etc/os-release")


class PlatformFamily(Enum):
    """Distributions grouped by package-manager convention."""

    DEBIAN = "debian"
    ARCH = "arch"
    FEDORA = "fedora"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


# os-release ID / ID_LIKE tokens -> family
_FAMILY_IDS: Dict[str, PlatformFamily] = {
    "debian": PlatformFamily.DEBIAN,
    "ubuntu": PlatformFamily.DEBIAN,
    "linuxmint": PlatformFamily.DEBIAN,
    "pop": PlatformFamily.DEBIAN,
    "elementary": PlatformFamily.DEBIAN,
    "raspbian": PlatformFamily.DEBIAN,
    "arch": PlatformFamily.ARCH,
    "archarm": PlatformFamily.ARCH,
    "manjaro": PlatformFamily.ARCH,
    "endeavouros": PlatformFamily.ARCH,
    "garuda": PlatformFamily.ARCH,
    "fedora": PlatformFamily.FEDORA,
    "rhel": PlatformFamily.FEDORA,
    "centos": PlatformFamily.FEDORA,
    "rocky": PlatformFamily.FEDORA,
    "almalinux": PlatformFamily.FEDORA,
}


@dataclass(frozen=True)
class PlatformIdentity:
    """Human-readable name plus the family used for package hints."""

    name: str
    family: PlatformFamily

    def __str__(self) -> str:
        return self.name


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse os-release KEY=value lines, unquoting values."""
    fields: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        fields[key.strip()] = value.strip().strip('"').strip("'")
    return fields


def family_from_os_release(fields: Dict[str, str]) -> PlatformFamily:
    """Map os-release ID, then ID_LIKE entries, to a platform family."""
    candidates = [fields.get("ID", "")] + fields.get("ID_LIKE", "").split()
    for candidate in candidates:
        family = _FAMILY_IDS.get(candidate.lower())
        if family is not None:
            return family
    return PlatformFamily.UNKNOWN


def detect_platform(os_release: Optional[Path] = None) -> PlatformIdentity:
    """Detect the host platform identity.

    Args:
        os_release: os-release file to read (defaults to /etc/os-release)
    """
    os_release = os_release if os_release is not None else OS_RELEASE_FILE
    try:
        fields = parse_os_release(os_release.read_text(encoding="utf-8"))
    except OSError:
        logger.debug(f"No readable {os_release}, falling back to OS name")
        return PlatformIdentity(name=platform.system() or "unknown", family=PlatformFamily.UNKNOWN)

    name = fields.get("PRETTY_NAME") or fields.get("NAME") or platform.system() or "unknown"
    family = family_from_os_release(fields)
    logger.debug(f"Detected platform {name!r} ({family})")
    return PlatformIdentity(name=name, family=family)
