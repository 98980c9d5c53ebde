"""Tests for pkg-config querying and flag classification."""

from unittest.mock import MagicMock, patch

from cxxbuild.packages.pkg_config import PkgConfig, classify_flags, parse_flag_string


class TestClassifyFlags:
    def test_sdl2_output(self):
        """Test classifying typical sdl2 output."""
        flags = classify_flags("-I/usr/include/SDL2 -D_REENTRANT -lSDL2 -lSDL2_mixer")

        assert flags.compile_flags == ["-I/usr/include/SDL2", "-D_REENTRANT"]
        assert flags.link_flags == ["-lSDL2", "-lSDL2_mixer"]

    def test_linker_passthrough_is_link_only(self):
        """Test that -Wl, options go to the link flags only."""
        flags = classify_flags("-Wl,-rpath,/opt/lib -Wno-deprecated -L/opt/lib")

        assert flags.compile_flags == ["-Wno-deprecated"]
        assert flags.link_flags == ["-Wl,-rpath,/opt/lib", "-L/opt/lib"]

    def test_framework_goes_to_both(self):
        """Test that -framework pairs go to both flag lists."""
        flags = classify_flags("-framework -F/Library/Frameworks")

        assert flags.compile_flags == ["-framework", "-F/Library/Frameworks"]
        assert flags.link_flags == ["-framework"]

    def test_unrecognized_tokens_dropped(self):
        """Test that unknown tokens are dropped."""
        flags = classify_flags("-pthread -I/x --static -O2 -lz")

        assert flags.compile_flags == ["-I/x"]
        assert flags.link_flags == ["-lz"]

    def test_empty_output(self):
        """Test classifying empty output."""
        flags = classify_flags("   ")

        assert flags.compile_flags == []
        assert flags.link_flags == []

    def test_quoted_values(self):
        """Test that quoted values stay one token."""
        assert parse_flag_string('-I"/opt/my lib/include" -lfoo') == ["-I/opt/my lib/include", "-lfoo"]

    def test_unbalanced_quotes_fall_back(self):
        """Test that unbalanced quotes fall back to whitespace splitting."""
        assert parse_flag_string('-I"/opt -lfoo') == ['-I"/opt', "-lfoo"]


def _completed(returncode: int, stdout: str) -> MagicMock:
    result = MagicMock()
    result.returncode = returncode
    result.stdout = stdout
    return result


class TestPkgConfigQuery:
    def test_query_lowercases_packages(self):
        """Test that package names are lower-cased for the query."""
        pkg = PkgConfig()

        with patch("cxxbuild.packages.pkg_config.find_executable", return_value="/usr/bin/pkg-config"):
            with patch(
                "cxxbuild.packages.pkg_config.safe_run",
                return_value=_completed(0, "-I/usr/include/SDL2 -lSDL2\n"),
            ) as mock_run:
                output = pkg.query(["SDL2-devel", "SDL2_mixer-devel"])

        assert output == "-I/usr/include/SDL2 -lSDL2"
        assert mock_run.call_args[0][0] == [
            "pkg-config",
            "--cflags",
            "--libs",
            "sdl2-devel",
            "sdl2_mixer-devel",
        ]

    def test_missing_binary(self):
        """Test that a missing pkg-config yields no flags."""
        pkg = PkgConfig()

        with patch("cxxbuild.packages.pkg_config.find_executable", return_value=None):
            with patch("cxxbuild.packages.pkg_config.safe_run") as mock_run:
                assert pkg.query(["zlib"]) is None
                assert pkg.flags_for(["zlib"]) is None

        mock_run.assert_not_called()

    def test_failed_query(self):
        """Test that a failing query yields no flags."""
        pkg = PkgConfig()

        with patch("cxxbuild.packages.pkg_config.find_executable", return_value="/usr/bin/pkg-config"):
            with patch("cxxbuild.packages.pkg_config.safe_run", return_value=_completed(1, "")):
                assert pkg.flags_for(["nosuchlib"]) is None

    def test_os_error_is_not_fatal(self):
        """Test that an OSError while querying is not fatal."""
        pkg = PkgConfig()

        with patch("cxxbuild.packages.pkg_config.find_executable", return_value="/usr/bin/pkg-config"):
            with patch("cxxbuild.packages.pkg_config.safe_run", side_effect=OSError("exec format error")):
                assert pkg.query(["zlib"]) is None

    def test_no_packages(self):
        """Test that no packages means no query."""
        assert PkgConfig().query([]) is None

    def test_flags_for_classifies(self):
        """Test that flags_for returns classified flags."""
        pkg = PkgConfig(executable="pkgconf")

        with patch("cxxbuild.packages.pkg_config.find_executable", return_value="/usr/bin/pkgconf"):
            with patch(
                "cxxbuild.packages.pkg_config.safe_run",
                return_value=_completed(0, "-I/usr/include/glm -lglm"),
            ) as mock_run:
                flags = pkg.flags_for(["glm"])

        assert mock_run.call_args[0][0][0] == "pkgconf"
        assert flags.compile_flags == ["-I/usr/include/glm"]
        assert flags.link_flags == ["-lglm"]

    def test_environment_override(self, monkeypatch):
        """Test that CXXBUILD_PKG_CONFIG selects the binary."""
        monkeypatch.setenv("CXXBUILD_PKG_CONFIG", "x86_64-w64-mingw32-pkg-config")

        assert PkgConfig().executable == "x86_64-w64-mingw32-pkg-config"
