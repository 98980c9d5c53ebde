"""
User-facing progress output for cxxbuild.

Every line carries the time elapsed since the program started, as MM:SS.cc,
so a slow compile or a slow package query stands out:

    00:00.01 g++ -std=c++20 -pipe ... -c util.cpp -o util.cpp.o
    00:00.84 g++ -pipe ... main.cpp.o util.cpp.o -o main
    00:01.02 Build complete on Ubuntu 24.04 LTS

Usage:
    from cxxbuild.output import log, log_command, log_warning

    log("No sources found.")
    log_command(["g++", "main.cpp", "-o", "main"])
    log_warning("Continuing in sloppy mode, ignoring missing headers.")

Diagnostics that only matter when debugging cxxbuild itself go through the
standard logging module instead.
"""

import shlex
import sys
import time
from types import TracebackType
from typing import Optional, Sequence, TextIO

_start_time: Optional[float] = None
_output_stream: Optional[TextIO] = None  # None means the current sys.stdout
_verbose: bool = False


def init_timer(output_stream: Optional[TextIO] = None) -> None:
    """
    Reset the reference time for timestamps.

    The CLI calls this once at startup; the first log call does it otherwise.

    Args:
        output_stream: Stream to write to instead of sys.stdout
    """
    global _start_time, _output_stream
    _start_time = time.time()
    if output_stream is not None:
        _output_stream = output_stream


def set_verbose(verbose: bool) -> None:
    """Show or hide verbose-only lines."""
    global _verbose
    _verbose = verbose


def format_timestamp() -> str:
    """Elapsed time since init_timer() as MM:SS.cc."""
    if _start_time is None:
        init_timer()
    elapsed = time.time() - _start_time  # type: ignore
    minutes, seconds = divmod(elapsed, 60)
    return f"{int(minutes):02d}:{seconds:05.2f}"


def _print(message: str) -> None:
    stream = _output_stream if _output_stream is not None else sys.stdout
    stream.write(f"{format_timestamp()} {message}\n")
    stream.flush()


def log(message: str, verbose_only: bool = False) -> None:
    if verbose_only and not _verbose:
        return
    _print(message)


def log_detail(message: str, indent: int = 4, verbose_only: bool = False) -> None:
    """Indented follow-up line for the previous message."""
    if verbose_only and not _verbose:
        return
    _print(" " * indent + message)


def log_command(argv: Sequence[str]) -> None:
    """Echo a command line exactly as it is about to be executed."""
    _print(shlex.join(argv))


def log_file(action: str, path: str, verbose_only: bool = True) -> None:
    """Per-file line such as ``[up to date] util.cpp``."""
    if verbose_only and not _verbose:
        return
    _print(f"    [{action}] {path}")


def log_error(message: str) -> None:
    _print(f"ERROR: {message}")


def log_warning(message: str) -> None:
    _print(f"WARNING: {message}")


def log_success(message: str) -> None:
    _print(message)


class TimedLogger:
    """
    Announce a pipeline phase and how long it took.

    Usage:
        with TimedLogger("Resolving headers") as timed:
            timed.detail("12 headers, 0 missing")
        # "Resolving headers..." then "    Done (0.01s)"; verbose-only by default
    """

    def __init__(self, operation: str, verbose_only: bool = True):
        self.operation = operation
        self.verbose_only = verbose_only
        self.start_time = 0.0

    def __enter__(self) -> "TimedLogger":
        self.start_time = time.time()
        log(f"{self.operation}...", self.verbose_only)
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        if exc_type is None:
            log_detail(f"Done ({time.time() - self.start_time:.2f}s)", verbose_only=self.verbose_only)

    def detail(self, message: str) -> None:
        log_detail(message, verbose_only=self.verbose_only)
