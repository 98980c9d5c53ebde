"""Build Mode Configuration.

This module defines the compiler flags every build uses and the flags each
build mode adds on top.

Design:
    Modes are independent switches (debug, optimized, strict, sloppy) rather
    than one exclusive profile, so their flags are declared per mode and
    concatenated in a fixed order. Debug wins over optimized: asking for both
    yields an unoptimized build with debug info.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple


class BuildMode(Enum):
    """Build mode switches, in flag concatenation order."""

    DEBUG = "debug"
    OPTIMIZED = "opt"
    STRICT = "strict"
    SLOPPY = "sloppy"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ModeFlags:
    """Flags one build mode contributes.

    Attributes:
        name: Mode identifier (matches BuildMode value)
        description: Human-readable mode description
        compile_flags: Flags added to every compile and link invocation
    """

    name: str
    description: str
    compile_flags: Tuple[str, ...]


BASE_FLAGS: Tuple[str, ...] = (
    "-pipe",
    "-fPIC",
    "-fno-plt",
    "-fstack-protector-strong",
    "-Wall",
    "-Wshadow",
    "-Wpedantic",
    "-Wno-parentheses",
    "-Wfatal-errors",
    "-Wvla",
    "-Wignored-qualifiers",
)

MODES: dict[BuildMode, ModeFlags] = {
    BuildMode.DEBUG: ModeFlags(
        name="debug",
        description="No optimization, debug info",
        compile_flags=("-O0", "-g"),
    ),
    BuildMode.OPTIMIZED: ModeFlags(
        name="opt",
        description="Optimized build",
        compile_flags=("-O2",),
    ),
    BuildMode.STRICT: ModeFlags(
        name="strict",
        description="Extra warnings",
        compile_flags=("-Wextra", "-Wconversion"),
    ),
    BuildMode.SLOPPY: ModeFlags(
        name="sloppy",
        description="Silence warnings, accept non-conforming code and missing headers",
        compile_flags=("-w", "-fpermissive"),
    ),
}


def effective_modes(modes: Iterable[BuildMode]) -> List[BuildMode]:
    """Active modes in concatenation order, with debug overriding optimized."""
    active = set(modes)
    if BuildMode.DEBUG in active:
        active.discard(BuildMode.OPTIMIZED)
    return [mode for mode in BuildMode if mode in active]


def get_mode_flags(modes: Iterable[BuildMode]) -> List[str]:
    """Flags contributed by a set of build modes, in fixed order."""
    flags: List[str] = []
    for mode in effective_modes(modes):
        flags.extend(MODES[mode].compile_flags)
    return flags


def format_mode_banner(modes: Iterable[BuildMode], compiler: str) -> str:
    """Format a one-line summary of compiler and modes for verbose output."""
    names = [str(mode) for mode in effective_modes(modes)] or ["default"]
    return f"COMPILER={compiler} MODES={','.join(names)}"
