"""Tests for missing-header package hints."""

import pytest

from cxxbuild.packages.package_hints import KNOWN_HEADERS, PackageHint, resolve
from cxxbuild.packages.platform_detect import PlatformFamily


class TestResolve:
    @pytest.mark.parametrize(
        "header,family,package",
        [
            ("boost/asio.hpp", PlatformFamily.DEBIAN, "libboost-all-dev"),
            ("boost/asio.hpp", PlatformFamily.ARCH, "boost"),
            ("boost/asio.hpp", PlatformFamily.FEDORA, "boost-devel"),
            ("glm/glm.hpp", PlatformFamily.DEBIAN, "libglm-dev"),
            ("GL/gl.h", PlatformFamily.DEBIAN, "mesa-common-dev"),
            ("GL/glu.h", PlatformFamily.FEDORA, "mesa-libGL-devel"),
            ("gtk/gtk.h", PlatformFamily.ARCH, "gtk3"),
            ("vulkan/vulkan.h", PlatformFamily.DEBIAN, "libvulkan-dev"),
        ],
    )
    def test_known_headers(self, header, family, package):
        """Test hints for well-known headers."""
        hint = resolve(header, family)

        assert hint is not None
        assert hint.package == package

    def test_sdl2_debian_scenario(self):
        """SDL2 on a Debian-family host names both SDL packages."""
        hint = resolve("SDL2/SDL.h", PlatformFamily.DEBIAN)

        assert hint == PackageHint(
            "libsdl2-dev libsdl2-mixer-dev",
            "apt install libsdl2-dev libsdl2-mixer-dev",
        )
        assert hint.packages == ("libsdl2-dev", "libsdl2-mixer-dev")

    def test_match_is_case_insensitive(self):
        """Test that header matching ignores case."""
        assert resolve("BOOST/ANY.HPP", PlatformFamily.DEBIAN) == resolve("boost/any.hpp", PlatformFamily.DEBIAN)

    def test_unknown_family_uses_debian_hint(self):
        """Test the Debian fallback for unknown distributions."""
        assert resolve("glm/glm.hpp", PlatformFamily.UNKNOWN) == resolve("glm/glm.hpp", PlatformFamily.DEBIAN)

    def test_unknown_header(self):
        """Test that an unknown header has no hint."""
        assert resolve("mylib.h", PlatformFamily.DEBIAN) is None
        assert resolve("png.h", PlatformFamily.ARCH) is None

    def test_install_commands_match_package_manager(self):
        """Test the install command for each family."""
        assert resolve("glm/glm.hpp", PlatformFamily.ARCH).install_command == "pacman -S glm"
        assert resolve("glm/glm.hpp", PlatformFamily.FEDORA).install_command == "dnf install glm-devel"

    def test_every_marker_covers_every_family(self):
        """Test that every table row names a package for every family."""
        families = {PlatformFamily.DEBIAN, PlatformFamily.ARCH, PlatformFamily.FEDORA}
        for markers, hints in KNOWN_HEADERS:
            assert set(hints) == families, markers
