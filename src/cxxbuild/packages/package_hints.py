"""Package hints for missing headers.

Maps a missing header to the distribution package that most likely provides
it. Classification is a case-insensitive substring match of the header path
against a fixed table of known third-party header markers; each marker has
one package per platform family. UNKNOWN platforms get the Debian-family
hint.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .platform_detect import PlatformFamily


@dataclass(frozen=True)
class PackageHint:
    """Installable package name and a human-readable install command."""

    package: str
    install_command: str

    @property
    def packages(self) -> Tuple[str, ...]:
        """Individual package names (a hint may name several)."""
        return tuple(self.package.split())


def _hints(debian: str, arch: str, fedora: str) -> Dict[PlatformFamily, PackageHint]:
    return {
        PlatformFamily.DEBIAN: PackageHint(debian, f"apt install {debian}"),
        PlatformFamily.ARCH: PackageHint(arch, f"pacman -S {arch}"),
        PlatformFamily.FEDORA: PackageHint(fedora, f"dnf install {fedora}"),
    }


# Header marker -> hint per family. Checked in order, first match wins.
KNOWN_HEADERS: Tuple[Tuple[Tuple[str, ...], Dict[PlatformFamily, PackageHint]], ...] = (
    (("boost/",), _hints("libboost-all-dev", "boost", "boost-devel")),
    (
        ("sdl2/",),
        _hints("libsdl2-dev libsdl2-mixer-dev", "sdl2 sdl2_mixer", "SDL2-devel SDL2_mixer-devel"),
    ),
    (("glm/",), _hints("libglm-dev", "glm", "glm-devel")),
    (("gl.h", "glu.h"), _hints("mesa-common-dev", "mesa", "mesa-libGL-devel")),
    (("gtk/gtk.h",), _hints("libgtk-3-dev", "gtk3", "gtk3-devel")),
    (("vulkan/",), _hints("libvulkan-dev", "vulkan-devel", "vulkan-loader-devel")),
)


def resolve(header: str, family: PlatformFamily) -> Optional[PackageHint]:
    """Find the package hint for a missing header.

    Args:
        header: Header name as written in the include directive
        family: Platform family of the host

    Returns:
        PackageHint, or None when the header is not a known third-party header
    """
    lowered = header.lower()
    if family is PlatformFamily.UNKNOWN:
        family = PlatformFamily.DEBIAN
    for markers, hints in KNOWN_HEADERS:
        if any(marker in lowered for marker in markers):
            return hints[family]
    return None
