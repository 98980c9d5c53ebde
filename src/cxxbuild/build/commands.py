"""Compiler and linker command assembly.

Commands are built as an ordered list of typed arguments and only turned into
an argv list at the process boundary. The category order is fixed:

    compile:     tool, std, base, mode, extra-compile, -c, source, -o, object
    single-step: tool, std, base, mode, extra-compile, source, -o, output, extra-link
    link:        tool, base, mode, objects..., -o, output, extra-link

so the same BuildConfig and inputs always yield the same token sequence.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Sequence, Tuple

from .build_context import BuildConfig


class ArgKind(Enum):
    """Category of a command-line argument."""

    TOOL = "tool"
    STD = "std"
    BASE = "base"
    MODE = "mode"
    EXTRA_COMPILE = "extra_compile"
    COMPILE_ONLY = "compile_only"
    INPUT = "input"
    OUTPUT_FLAG = "output_flag"
    OUTPUT = "output"
    EXTRA_LINK = "extra_link"


class CommandKind(Enum):
    COMPILE = "compile"
    SINGLE_STEP = "single_step"
    LINK = "link"


@dataclass(frozen=True)
class Arg:
    kind: ArgKind
    value: str


@dataclass(frozen=True)
class Command:
    """A structured toolchain invocation."""

    kind: CommandKind
    args: Tuple[Arg, ...] = field(default_factory=tuple)

    def argv(self) -> List[str]:
        """Serialize to the argument vector passed to the process."""
        return [arg.value for arg in self.args]

    def values(self, kind: ArgKind) -> List[str]:
        return [arg.value for arg in self.args if arg.kind is kind]

    @property
    def output(self) -> str:
        outputs = self.values(ArgKind.OUTPUT)
        return outputs[0] if outputs else ""

    def __str__(self) -> str:
        return " ".join(self.argv())


class _ArgList:
    def __init__(self) -> None:
        self.args: List[Arg] = []

    def add(self, kind: ArgKind, values: Sequence[str]) -> "_ArgList":
        self.args.extend(Arg(kind, v) for v in values)
        return self

    def freeze(self, kind: CommandKind) -> Command:
        return Command(kind=kind, args=tuple(self.args))


def _flag_prefix(config: BuildConfig, with_std: bool) -> _ArgList:
    args = _ArgList().add(ArgKind.TOOL, [config.compiler])
    if with_std:
        args.add(ArgKind.STD, config.std_flag)
    return args.add(ArgKind.BASE, config.base_flags).add(ArgKind.MODE, config.mode_flags)


def compile_command(config: BuildConfig, source: Path, obj: Path) -> Command:
    """Compile one source to an object file."""
    return (
        _flag_prefix(config, with_std=True)
        .add(ArgKind.EXTRA_COMPILE, config.extra_compile_flags)
        .add(ArgKind.COMPILE_ONLY, ["-c"])
        .add(ArgKind.INPUT, [source.as_posix()])
        .add(ArgKind.OUTPUT_FLAG, ["-o"])
        .add(ArgKind.OUTPUT, [obj.as_posix()])
        .freeze(CommandKind.COMPILE)
    )


def single_step_command(config: BuildConfig, source: Path, output: str) -> Command:
    """Compile and link one source directly into the final executable."""
    return (
        _flag_prefix(config, with_std=True)
        .add(ArgKind.EXTRA_COMPILE, config.extra_compile_flags)
        .add(ArgKind.INPUT, [source.as_posix()])
        .add(ArgKind.OUTPUT_FLAG, ["-o"])
        .add(ArgKind.OUTPUT, [output])
        .add(ArgKind.EXTRA_LINK, config.extra_link_flags)
        .freeze(CommandKind.SINGLE_STEP)
    )


def link_command(config: BuildConfig, objects: Sequence[Path], output: str) -> Command:
    """Link object files into an executable."""
    return (
        _flag_prefix(config, with_std=False)
        .add(ArgKind.INPUT, [obj.as_posix() for obj in objects])
        .add(ArgKind.OUTPUT_FLAG, ["-o"])
        .add(ArgKind.OUTPUT, [output])
        .add(ArgKind.EXTRA_LINK, config.extra_link_flags)
        .freeze(CommandKind.LINK)
    )
