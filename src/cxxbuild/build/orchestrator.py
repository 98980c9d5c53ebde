"""
Build orchestration for cxxbuild projects.

One BuildOrchestrator.build() call is one build run:

    1. Discover and classify sources
    2. Clean (and stop) if requested
    3. Scan includes, resolve headers, report missing ones with package
       hints and merge pkg-config flags
    4. Generate a qmake project file (and stop) if requested
    5. Build with the chosen strategy, then the tests if requested
    6. Persist the compile cache
    7. Run the produced executable if requested

Fatal conditions never escape as exceptions; they become a failed
BuildResult carrying the message and the process exit code.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console

from ..commands.clean import clean_artifacts
from ..commands.qmake_project import QmakeProjectError, generate_pro_file
from ..docker_utils import SandboxUnavailableError
from ..output import TimedLogger, log, log_error, log_success, log_warning
from ..packages.hint_engine import MissingHeadersError, PackageHintEngine
from ..packages.pkg_config import PkgConfig
from ..packages.platform_detect import PlatformIdentity, detect_platform
from .build_context import BuildRequest
from .build_profiles import format_mode_banner
from .compile_cache import CompileCache, get_cache_file_name
from .header_resolver import HeaderResolver
from .include_scanner import gather_includes
from .planner import BuildPlanner, PlanResult, Strategy, choose_strategy
from .source_scanner import SourceDiscoveryError, SourceScanner, guess_output_name
from .toolchain_runner import TestFailureError, ToolchainError, ToolchainRunner

# Module-level logger
logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Result of one build run."""

    success: bool
    message: str
    exit_code: int = 0
    output: Optional[str] = None
    plan: Optional[PlanResult] = None
    build_time: float = 0.0

    @classmethod
    def failure(cls, message: str, exit_code: int = 1, plan: Optional[PlanResult] = None) -> "BuildResult":
        return cls(success=False, message=message, exit_code=exit_code or 1, plan=plan)


class BuildOrchestrator:
    """Runs the full discovery, resolution and build pipeline for a project."""

    def __init__(
        self,
        platform_identity: Optional[PlatformIdentity] = None,
        pkg_config: Optional[PkgConfig] = None,
        header_resolver_factory: Optional[Callable[[Path], HeaderResolver]] = None,
        runner_factory: Optional[Callable[[BuildRequest], ToolchainRunner]] = None,
        console: Optional[Console] = None,
    ):
        """
        Initialize the orchestrator.

        All arguments replace a collaborator; by default the host platform is
        detected, pkg-config comes from PATH, the conventional include
        directories are searched and commands run on the host or in Docker.
        """
        self.platform_identity = platform_identity
        self.pkg_config = pkg_config
        self.header_resolver_factory = header_resolver_factory or HeaderResolver.for_project
        self.runner_factory = runner_factory or (
            lambda request: ToolchainRunner(request.project_dir, cross_compile=request.cross_compile)
        )
        self.console = console

    def build(self, request: BuildRequest) -> BuildResult:
        """Execute one build run.

        Args:
            request: Parsed command-line parameters

        Returns:
            BuildResult with status, message and exit code
        """
        start_time = time.time()
        project_dir = request.project_dir
        identity = self.platform_identity or detect_platform()

        try:
            collection = SourceScanner(project_dir).scan()
        except SourceDiscoveryError as e:
            return BuildResult.failure(str(e))

        if not collection and not request.clean:
            log("No sources found.")
            return BuildResult(success=True, message="Nothing to build")

        output_name = guess_output_name(collection, request.cross_compile)
        cache_file = project_dir / get_cache_file_name()

        if request.clean:
            clean_artifacts(project_dir, output_name, cache_file)
            return BuildResult(success=True, message="Cleaned", output=output_name)

        builder = request.config_builder()
        log(format_mode_banner(builder.modes, builder.compiler), verbose_only=True)

        with TimedLogger("Resolving headers") as timed:
            headers = gather_includes(project_dir / s.path for s in collection.sources)
            resolution = self.header_resolver_factory(project_dir).resolve(headers)
            timed.detail(f"{len(headers)} headers, {len(resolution.missing)} missing")

        if resolution.missing:
            engine = PackageHintEngine(identity.family, pkg_config=self.pkg_config, console=self.console)
            try:
                engine.process(resolution.missing, builder)
            except MissingHeadersError as e:
                log_error(str(e))
                return BuildResult.failure(str(e))

        config = builder.build()

        if request.pro:
            try:
                pro_file = generate_pro_file(project_dir, collection, config, output_name)
            except QmakeProjectError as e:
                log_warning(f"Could not generate .pro: {e}")
                return BuildResult(success=True, message=str(e))
            log_success(f"Wrote {pro_file.name}")
            return BuildResult(success=True, message=f"Wrote {pro_file.name}", output=pro_file.name)

        runner = self.runner_factory(request)
        cache = CompileCache.load(cache_file, project_dir)
        planner = BuildPlanner(config, collection, runner, cache, output_name)
        uses_cache = choose_strategy(collection, request.test) is Strategy.MULTI_STEP

        plan: Optional[PlanResult] = None
        try:
            plan = planner.build(test_mode=request.test)
        except TestFailureError as e:
            log_error(f"Test error: {e}")
            return BuildResult.failure(str(e), exit_code=e.returncode)
        except (ToolchainError, SandboxUnavailableError) as e:
            log_error(f"Build error: {e}")
            return BuildResult.failure(str(e))
        finally:
            if uses_cache:
                cache.save()

        output = plan.output
        if request.run and output:
            if request.cross_compile:
                log_warning(f"Cross-compiled {output} can't be run on this host.")
            else:
                log(f"Running: {output}")
                try:
                    runner.run_program(output)
                except ToolchainError as e:
                    log_error(str(e))
                    return BuildResult.failure(str(e), exit_code=e.returncode, plan=plan)

        build_time = time.time() - start_time
        log_success(f"Build complete on {identity}")
        return BuildResult(
            success=True,
            message="Build complete",
            output=output,
            plan=plan,
            build_time=build_time,
        )
