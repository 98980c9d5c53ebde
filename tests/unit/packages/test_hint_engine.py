"""Tests for reporting missing headers and merging package flags."""

import io
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from cxxbuild.build.build_context import BuildRequest
from cxxbuild.build.build_profiles import BuildMode
from cxxbuild.packages.hint_engine import MissingHeadersError, PackageHintEngine
from cxxbuild.packages.pkg_config import ClassifiedFlags
from cxxbuild.packages.platform_detect import PlatformFamily


def _console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


def _pkg_config(flags=None) -> MagicMock:
    pkg = MagicMock()
    pkg.flags_for.return_value = flags
    return pkg


def _builder(*modes: BuildMode):
    return BuildRequest(project_dir=Path("."), modes=frozenset(modes)).config_builder()


class TestPackageHintEngine:
    def test_nothing_missing(self):
        """Test that no missing headers means no report."""
        pkg = _pkg_config()
        engine = PackageHintEngine(PlatformFamily.DEBIAN, pkg_config=pkg, console=_console())

        report = engine.process([], _builder())

        assert report.missing == []
        pkg.flags_for.assert_not_called()

    def test_missing_header_is_fatal_after_report(self):
        """Test that missing headers are reported, then raised."""
        console = _console()
        pkg = _pkg_config(ClassifiedFlags(["-I/usr/include/SDL2", "-D_REENTRANT"], ["-lSDL2", "-lSDL2_mixer"]))
        engine = PackageHintEngine(PlatformFamily.DEBIAN, pkg_config=pkg, console=console)

        with pytest.raises(MissingHeadersError) as exc_info:
            engine.process(["SDL2/SDL.h"], _builder())

        text = console.file.getvalue()
        assert "SDL2/SDL.h" in text
        assert "apt install libsdl2-dev libsdl2-mixer-dev" in text
        assert exc_info.value.missing == ["SDL2/SDL.h"]
        assert exc_info.value.hints["SDL2/SDL.h"].package == "libsdl2-dev libsdl2-mixer-dev"
        pkg.flags_for.assert_called_once_with(("libsdl2-dev", "libsdl2-mixer-dev"))

    def test_sloppy_mode_merges_flags_and_continues(self):
        """Test that sloppy mode merges flags instead of failing."""
        pkg = _pkg_config(ClassifiedFlags(["-I/usr/include/SDL2", "-D_REENTRANT"], ["-lSDL2", "-lSDL2_mixer"]))
        engine = PackageHintEngine(PlatformFamily.DEBIAN, pkg_config=pkg, console=_console())
        builder = _builder(BuildMode.SLOPPY)

        report = engine.process(["SDL2/SDL.h"], builder)

        config = builder.build()
        assert config.extra_compile_flags == ("-I/usr/include/SDL2", "-D_REENTRANT")
        assert config.extra_link_flags == ("-lSDL2", "-lSDL2_mixer")
        assert report.link_flags == ["-lSDL2", "-lSDL2_mixer"]

    def test_unknown_header_listed_without_hint(self):
        """Test that an unknown header is listed without a package."""
        console = _console()
        pkg = _pkg_config()
        engine = PackageHintEngine(PlatformFamily.ARCH, pkg_config=pkg, console=console)

        report = engine.process(["mything.h"], _builder(BuildMode.SLOPPY))

        assert report.unhinted == ["mything.h"]
        assert "mything.h" in console.file.getvalue()
        pkg.flags_for.assert_not_called()

    def test_pkg_config_without_answer_adds_nothing(self):
        """Test that an empty pkg-config answer adds no flags."""
        pkg = _pkg_config(None)
        engine = PackageHintEngine(PlatformFamily.FEDORA, pkg_config=pkg, console=_console())
        builder = _builder(BuildMode.SLOPPY)

        report = engine.process(["glm/glm.hpp"], builder)

        assert report.hints["glm/glm.hpp"].install_command == "dnf install glm-devel"
        assert builder.build().extra_compile_flags == ()

    def test_flags_merge_in_missing_order(self):
        """Test that flags merge in the order headers went missing."""
        pkg = MagicMock()
        pkg.flags_for.side_effect = [
            ClassifiedFlags(["-I/a"], ["-la"]),
            ClassifiedFlags(["-I/b"], ["-lb"]),
        ]
        engine = PackageHintEngine(PlatformFamily.DEBIAN, pkg_config=pkg, console=_console())
        builder = _builder(BuildMode.SLOPPY)

        engine.process(["boost/any.hpp", "glm/glm.hpp"], builder)

        assert builder.extra_compile_flags == ["-I/a", "-I/b"]
        assert builder.extra_link_flags == ["-la", "-lb"]

    def test_error_message_names_headers(self):
        """Test that the error names every missing header."""
        engine = PackageHintEngine(PlatformFamily.DEBIAN, pkg_config=_pkg_config(), console=_console())

        with pytest.raises(MissingHeadersError, match="2 missing header"):
            engine.process(["a.h", "b.h"], _builder())
