"""Build Planner.

Chooses how a classified source set is turned into an executable and drives
the toolchain runner through the steps.

Strategies:
    SINGLE_STEP - exactly one non-test source, no test sources, test mode
                  off: one compiler call compiles and links straight into the
                  final executable. No object file, so no staleness check.
    MULTI_STEP  - everything else: each source is compiled to its own object
                  when the compile cache says it is stale, then all non-test
                  objects are linked into the final executable.

Test sequence (test mode with at least one test source):
    Non-test sources are compiled (cache-respecting), then each test source
    is compiled, linked with the non-entry-point objects into its own
    executable and run. The first failing test stops the sequence.

Every source is evaluated against the cache at most once per run; later
requests for the same object reuse the first answer.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from ..output import log, log_file, log_warning
from .build_context import BuildConfig
from .commands import Command, compile_command, link_command, single_step_command
from .compile_cache import CompileCache
from .source_scanner import SourceCollection, SourceFile, ensure_exe_suffix
from .toolchain_runner import ToolchainRunner

logger = logging.getLogger(__name__)


class Strategy(Enum):
    SINGLE_STEP = "single_step"
    MULTI_STEP = "multi_step"

    def __str__(self) -> str:
        return self.value


def choose_strategy(collection: SourceCollection, test_mode: bool) -> Strategy:
    """Pick the build strategy for a source set."""
    if len(collection.non_test_sources) == 1 and not collection.test_sources and not test_mode:
        return Strategy.SINGLE_STEP
    return Strategy.MULTI_STEP


@dataclass
class PlanResult:
    """What one planner run did."""

    strategy: Strategy
    output: Optional[str] = None
    compiled: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    test_executables: List[Path] = field(default_factory=list)
    commands: List[Command] = field(default_factory=list)


class BuildPlanner:
    """Executes the chosen strategy and the optional test sequence."""

    def __init__(
        self,
        config: BuildConfig,
        collection: SourceCollection,
        runner: ToolchainRunner,
        cache: CompileCache,
        output_name: Optional[str],
    ):
        """Initialize the planner.

        Args:
            config: Frozen build configuration
            collection: Classified sources (paths relative to the project root)
            runner: Executes commands in the project directory
            cache: Compile cache, loaded by the caller and saved by the caller
            output_name: Final executable name, or None if nothing is linked
        """
        self.config = config
        self.collection = collection
        self.runner = runner
        self.cache = cache
        self.output_name = output_name
        self._objects: Dict[Path, Path] = {}

    def build(self, test_mode: bool = False) -> PlanResult:
        """Build the final executable, then the tests if requested.

        Raises:
            ToolchainError: On the first failing compile, link or test
        """
        strategy = choose_strategy(self.collection, test_mode)
        result = PlanResult(strategy=strategy, output=self.output_name)
        logger.debug(f"Strategy: {strategy} ({len(self.collection)} sources)")

        if strategy is Strategy.SINGLE_STEP:
            self._build_single_step(self.collection.non_test_sources[0], result)
        else:
            self._build_multi_step(result)

        if test_mode and self.collection.test_sources:
            self._build_and_run_tests(result)

        return result

    def _execute(self, command: Command, result: PlanResult) -> None:
        result.commands.append(command)
        self.runner.run(command)

    def _build_single_step(self, source: SourceFile, result: PlanResult) -> None:
        output = self.output_name or ensure_exe_suffix(source.path.stem, self.config.cross_compile)
        result.output = output
        self._execute(single_step_command(self.config, source.path, output), result)

    def compile_source(self, source: SourceFile, result: PlanResult) -> Path:
        """Compile a source to its object if stale; return the object path."""
        if source.path in self._objects:
            return self._objects[source.path]

        obj = source.object_path
        if self.cache.needs_rebuild(source.path, obj):
            self._execute(compile_command(self.config, source.path, obj), result)
            self.cache.update(source.path)
            result.compiled.append(source.path)
        else:
            log_file("up to date", source.cache_key)
            result.skipped.append(source.path)

        self._objects[source.path] = obj
        return obj

    def _build_multi_step(self, result: PlanResult) -> None:
        objects = [self.compile_source(s, result) for s in self.collection.non_test_sources]
        if not objects or not self.output_name:
            log("No non-test sources to link.", verbose_only=True)
            return
        self._execute(link_command(self.config, objects, self.output_name), result)

    def _build_and_run_tests(self, result: PlanResult) -> None:
        library_objects = [
            self.compile_source(s, result) for s in self.collection.normal_sources
        ]
        # Entry point object is compiled (it belongs to the main build) but never linked into tests
        entry = self.collection.entry_point
        if entry is not None:
            self.compile_source(entry, result)

        for test in self.collection.test_sources:
            test_obj = self.compile_source(test, result)
            executable = Path(
                ensure_exe_suffix(test.path.with_suffix("").as_posix(), self.config.cross_compile)
            )
            self._execute(link_command(self.config, [test_obj, *library_objects], executable.as_posix()), result)
            result.test_executables.append(executable)

            if self.config.cross_compile:
                log_warning(f"Cannot run cross-compiled test {executable} on this host, skipping.")
                continue

            log(f"Running test: {executable}")
            self.runner.run_test(executable)
