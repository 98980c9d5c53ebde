"""
Command-line interface for cxxbuild.

This module provides the `cxx` CLI tool. Actions and modes are plain words
and can be combined freely:

    cxx                      # Build the current directory
    cxx run                  # Build, then run the executable
    cxx test                 # Build, then build and run *_test sources
    cxx debug strict run     # Debug build with extra warnings, then run
    cxx sloppy               # Build even if headers are missing
    cxx clean                # Remove objects, executable and cache
    cxx pro                  # Write a qmake .pro file
    cxx clang                # Use clang++
    cxx --cxx=g++-14         # Use a specific compiler (also: cxx=g++-14)
    cxx --win64-docker       # Cross-compile for Windows in Docker
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from cxxbuild import __version__
from cxxbuild.build.build_context import DEFAULT_STD, BuildRequest
from cxxbuild.build.build_profiles import BuildMode
from cxxbuild.build.orchestrator import BuildOrchestrator
from cxxbuild.output import init_timer, set_verbose

ACTION_WORDS = ("run", "test", "clean", "pro", "version")
MODE_WORDS = {mode.value: mode for mode in BuildMode}
OTHER_WORDS = ("clang",)


def build_command(request: BuildRequest) -> None:
    """Run one build and exit with its status code."""
    try:
        orchestrator = BuildOrchestrator()
        result = orchestrator.build(request)

        if result.success:
            if request.verbose and result.build_time:
                print(f"Build time: {result.build_time:.2f}s")
            sys.exit(0)
        else:
            print()
            print("\033[1;31m✗ Build failed!\033[0m")
            sys.exit(result.exit_code)

    except KeyboardInterrupt:
        print()
        print("\033[1;33m✗ Build interrupted\033[0m")
        sys.exit(130)  # Standard exit code for SIGINT

    except Exception as e:
        print()
        print("\033[1;31m✗ Unexpected error\033[0m")
        print()
        print(f"{type(e).__name__}: {e}")

        if request.verbose:
            import traceback

            print()
            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(1)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cxx",
        description="Build C and C++ projects without a build script",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "words",
        nargs="*",
        metavar="WORD",
        help=(
            "Actions (run, test, clean, pro, version), modes (debug, opt, strict, "
            "sloppy), clang, or cxx=COMPILER"
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )
    parser.add_argument(
        "-C",
        "--directory",
        type=Path,
        default=None,
        help="Project directory (default: current directory)",
    )
    parser.add_argument(
        "--cxx",
        default=None,
        help="Compiler binary (default: g++, clang++ in clang mode)",
    )
    parser.add_argument(
        "--std",
        default=DEFAULT_STD,
        help=f"Language standard (default: {DEFAULT_STD})",
    )
    parser.add_argument(
        "--win64-docker",
        action="store_true",
        help="Cross-compile for 64-bit Windows using a MinGW Docker image",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )
    return parser


def parse_request(argv: Optional[Sequence[str]] = None) -> tuple[BuildRequest, bool]:
    """Parse the command line.

    Returns:
        The build request and whether only the version was asked for
    """
    parser = create_parser()
    parsed = parser.parse_args(argv)

    actions: set[str] = set()
    modes: set[BuildMode] = set()
    clang = False
    cxx: Optional[str] = parsed.cxx
    unknown: List[str] = []

    for word in parsed.words:
        if word in ACTION_WORDS:
            actions.add(word)
        elif word in MODE_WORDS:
            modes.add(MODE_WORDS[word])
        elif word in OTHER_WORDS:
            clang = True
        elif word.startswith("cxx="):
            cxx = word[len("cxx="):]
        else:
            unknown.append(word)

    if unknown:
        parser.error(f"unrecognized word(s): {' '.join(unknown)}")

    project_dir = parsed.directory if parsed.directory is not None else Path.cwd()
    request = BuildRequest(
        project_dir=project_dir,
        run="run" in actions,
        test="test" in actions,
        clean="clean" in actions,
        pro="pro" in actions,
        modes=frozenset(modes),
        clang=clang,
        cross_compile=parsed.win64_docker,
        cxx=cxx or None,
        std=parsed.std,
        verbose=parsed.verbose,
    )
    return request, parsed.version or "version" in actions


def main(argv: Optional[Sequence[str]] = None) -> None:
    """cxx command-line entry point."""
    request, show_version = parse_request(argv)

    if show_version:
        print(f"cxxbuild version {__version__}")
        sys.exit(0)

    if not request.project_dir.is_dir():
        print(f"\033[1;31m✗ Error: Path is not a directory: {request.project_dir}\033[0m")
        sys.exit(2)

    logging.basicConfig(
        level=logging.DEBUG if request.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    init_timer()
    set_verbose(request.verbose)
    build_command(request)


if __name__ == "__main__":
    main()
