"""Build Context - per-run build configuration.

This module defines:
- BuildRequest: Build parameters parsed from the command line
- BuildConfig: Immutable toolchain and flag configuration for one build run
- BuildConfigBuilder: Accumulates extra compile/link flags while headers are
  resolved, then produces the BuildConfig the planner consumes

Design:
    The request from the CLI fixes compiler, standard and modes. Package
    resolution may then append compile and link flags (from pkg-config). The
    builder is passed explicitly through that pipeline and frozen once, so
    no component mutates shared global state.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Tuple

from .build_profiles import BASE_FLAGS, BuildMode, get_mode_flags

DEFAULT_COMPILER = "g++"
DEFAULT_STD = "c++20"
CLANG_COMPILER = "clang++"
MINGW_COMPILER = "x86_64-w64-mingw32-g++"


def select_compiler(explicit: Optional[str], clang: bool, cross_compile: bool) -> str:
    """Pick the compiler binary.

    An explicit compiler wins; cross-compiling selects the MinGW compiler;
    otherwise clang mode selects clang++ and the default is g++.
    """
    if explicit:
        return explicit
    if cross_compile:
        return MINGW_COMPILER
    if clang:
        return CLANG_COMPILER
    return DEFAULT_COMPILER


@dataclass(frozen=True)
class BuildConfig:
    """Full build configuration consumed by command assembly.

    Attributes:
        compiler: Compiler driver binary (e.g., "g++", "clang++")
        std: Language standard tag for -std= (empty string omits the flag)
        modes: Active build modes
        cross_compile: Build for Windows inside the MinGW sandbox
        extra_compile_flags: Flags gathered from package metadata, in order
        extra_link_flags: Linker flags gathered from package metadata, in order
    """

    compiler: str = DEFAULT_COMPILER
    std: str = DEFAULT_STD
    modes: FrozenSet[BuildMode] = frozenset()
    cross_compile: bool = False
    extra_compile_flags: Tuple[str, ...] = ()
    extra_link_flags: Tuple[str, ...] = ()

    @property
    def sloppy(self) -> bool:
        return BuildMode.SLOPPY in self.modes

    @property
    def std_flag(self) -> List[str]:
        return [f"-std={self.std}"] if self.std else []

    @property
    def base_flags(self) -> List[str]:
        return list(BASE_FLAGS)

    @property
    def mode_flags(self) -> List[str]:
        return get_mode_flags(self.modes)


@dataclass
class BuildConfigBuilder:
    """Append-only accumulator for one run's build configuration."""

    compiler: str = DEFAULT_COMPILER
    std: str = DEFAULT_STD
    modes: FrozenSet[BuildMode] = frozenset()
    cross_compile: bool = False
    extra_compile_flags: List[str] = field(default_factory=list)
    extra_link_flags: List[str] = field(default_factory=list)

    @property
    def sloppy(self) -> bool:
        return BuildMode.SLOPPY in self.modes

    def add_compile_flags(self, flags: Iterable[str]) -> None:
        self.extra_compile_flags.extend(flags)

    def add_link_flags(self, flags: Iterable[str]) -> None:
        self.extra_link_flags.extend(flags)

    def build(self) -> BuildConfig:
        return BuildConfig(
            compiler=self.compiler,
            std=self.std,
            modes=frozenset(self.modes),
            cross_compile=self.cross_compile,
            extra_compile_flags=tuple(self.extra_compile_flags),
            extra_link_flags=tuple(self.extra_link_flags),
        )


@dataclass(frozen=True)
class BuildRequest:
    """Build parameters from the CLI.

    Attributes:
        project_dir: Directory holding the sources (also the working directory
            for every toolchain invocation)
        run: Run the produced executable after building
        test: Build and run the test sources
        clean: Remove build artifacts instead of building
        pro: Generate a qmake project file instead of building
        modes: Build modes (debug, opt, strict, sloppy)
        clang: Prefer clang++ over g++
        cross_compile: Cross-compile for 64-bit Windows in Docker
        cxx: Explicit compiler binary
        std: Language standard tag
        verbose: Enable verbose output
    """

    project_dir: Path
    run: bool = False
    test: bool = False
    clean: bool = False
    pro: bool = False
    modes: FrozenSet[BuildMode] = frozenset()
    clang: bool = False
    cross_compile: bool = False
    cxx: Optional[str] = None
    std: str = DEFAULT_STD
    verbose: bool = False

    def config_builder(self) -> BuildConfigBuilder:
        """Start this run's configuration from the request."""
        return BuildConfigBuilder(
            compiler=select_compiler(self.cxx, self.clang, self.cross_compile),
            std=self.std,
            modes=frozenset(self.modes),
            cross_compile=self.cross_compile,
        )
