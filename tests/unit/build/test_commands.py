"""Tests for compiler and linker command assembly."""

from pathlib import Path

from cxxbuild.build.build_context import BuildConfig
from cxxbuild.build.build_profiles import BASE_FLAGS, BuildMode
from cxxbuild.build.commands import (
    ArgKind,
    CommandKind,
    compile_command,
    link_command,
    single_step_command,
)


def _config(**kwargs) -> BuildConfig:
    defaults = dict(
        compiler="g++",
        std="c++20",
        modes=frozenset({BuildMode.DEBUG}),
        extra_compile_flags=("-I/usr/include/SDL2", "-D_REENTRANT"),
        extra_link_flags=("-lSDL2",),
    )
    defaults.update(kwargs)
    return BuildConfig(**defaults)


class TestCompileCommand:
    def test_token_order(self):
        """Test the token order of a compile command."""
        command = compile_command(_config(), Path("src/util.cpp"), Path("src/util.o"))

        assert command.kind is CommandKind.COMPILE
        assert command.argv() == [
            "g++",
            "-std=c++20",
            *BASE_FLAGS,
            "-O0",
            "-g",
            "-I/usr/include/SDL2",
            "-D_REENTRANT",
            "-c",
            "src/util.cpp",
            "-o",
            "src/util.o",
        ]
        assert command.output == "src/util.o"

    def test_no_link_flags_when_compiling(self):
        """Test that link flags stay out of compile commands."""
        command = compile_command(_config(), Path("a.cpp"), Path("a.o"))

        assert "-lSDL2" not in command.argv()
        assert command.values(ArgKind.EXTRA_LINK) == []


class TestSingleStepCommand:
    def test_token_order(self):
        """Test the token order of a single-step command."""
        command = single_step_command(_config(modes=frozenset()), Path("hello.cpp"), "hello")

        assert command.kind is CommandKind.SINGLE_STEP
        assert command.argv() == [
            "g++",
            "-std=c++20",
            *BASE_FLAGS,
            "-I/usr/include/SDL2",
            "-D_REENTRANT",
            "hello.cpp",
            "-o",
            "hello",
            "-lSDL2",
        ]
        assert "-c" not in command.argv()


class TestLinkCommand:
    def test_token_order(self):
        """Test the token order of a link command."""
        command = link_command(_config(), [Path("main.o"), Path("lib/util.o")], "main")

        assert command.kind is CommandKind.LINK
        assert command.argv() == [
            "g++",
            *BASE_FLAGS,
            "-O0",
            "-g",
            "main.o",
            "lib/util.o",
            "-o",
            "main",
            "-lSDL2",
        ]

    def test_link_has_no_std_or_compile_flags(self):
        """Test that linking passes no -std or compile-only flags."""
        command = link_command(_config(), [Path("a.o")], "a")

        assert command.values(ArgKind.STD) == []
        assert "-D_REENTRANT" not in command.argv()

    def test_deterministic(self):
        """Test that identical inputs give identical argv."""
        config = _config()
        objects = [Path("a.o"), Path("b.o")]

        assert link_command(config, objects, "a") == link_command(config, objects, "a")
        assert str(link_command(config, objects, "a")) == " ".join(link_command(config, objects, "a").argv())
