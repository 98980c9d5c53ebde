"""Toolchain Runner.

Executes compiler, linker, test and artifact commands. Every command is
echoed before it runs, its stdout/stderr go straight to the terminal, and
its exit status is the only thing inspected: nonzero raises.

When cross-compiling, toolchain commands are delegated to the MinGW Docker
container instead of the host toolchain.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from ..docker_utils import SandboxUnavailableError, check_docker_installed, get_docker_env, wrap_command
from ..output import log_command, log_error
from ..subprocess_utils import safe_run
from .commands import Command

logger = logging.getLogger(__name__)


class ToolchainError(Exception):
    """Raised when a toolchain or produced program exits with nonzero status."""

    def __init__(self, argv: Sequence[str], returncode: int, what: str = "Command"):
        self.argv = list(argv)
        self.returncode = returncode
        super().__init__(f"{what} failed with exit status {returncode}: {' '.join(self.argv)}")


class TestFailureError(ToolchainError):
    """Raised when a test executable exits with nonzero status."""

    __test__ = False  # not a pytest test class

    def __init__(self, argv: Sequence[str], returncode: int):
        super().__init__(argv, returncode, what="Test")


class ToolchainRunner:
    """Runs commands for one build, natively or in the cross-compile sandbox."""

    def __init__(self, project_dir: Path, cross_compile: bool = False, image: Optional[str] = None):
        """Initialize the runner.

        Args:
            project_dir: Working directory for every command
            cross_compile: Delegate toolchain commands to the Docker sandbox
            image: Docker image override for the sandbox
        """
        self.project_dir = project_dir
        self.cross_compile = cross_compile
        self.image = image
        self._sandbox_checked = False

    def _ensure_sandbox(self) -> None:
        if self._sandbox_checked:
            return
        if not check_docker_installed():
            raise SandboxUnavailableError(
                "Cross-compilation requires Docker, but the docker command is not available."
            )
        self._sandbox_checked = True

    def toolchain_argv(self, command: Command) -> List[str]:
        """Final argv for a toolchain command, wrapped when cross-compiling."""
        argv = command.argv()
        if self.cross_compile:
            return wrap_command(argv, self.project_dir, self.image)
        return argv

    def run(self, command: Command) -> None:
        """Run a compile or link command.

        Raises:
            ToolchainError: If the command exits with nonzero status
            SandboxUnavailableError: If cross-compiling without Docker
        """
        log_command(command.argv())
        env = None
        if self.cross_compile:
            self._ensure_sandbox()
            env = get_docker_env()
        argv = self.toolchain_argv(command)
        if self.cross_compile:
            log_command(argv)
        returncode = self._execute(argv, env=env)
        if returncode != 0:
            raise ToolchainError(command.argv(), returncode, what=command.kind.value.replace("_", "-"))

    def run_test(self, executable: Path) -> None:
        """Run a test executable from the project directory.

        Raises:
            TestFailureError: If the test exits with nonzero status
        """
        argv = [f"./{executable.as_posix()}"]
        returncode = self._execute(argv)
        if returncode != 0:
            raise TestFailureError(argv, returncode)

    def run_program(self, executable: str) -> None:
        """Run the produced artifact with the terminal's stdin.

        Raises:
            ToolchainError: If the program exits with nonzero status
        """
        argv = [f"./{executable}"]
        returncode = self._execute(argv, stdin=None)
        if returncode != 0:
            raise ToolchainError(argv, returncode, what="Program")

    def _execute(self, argv: List[str], env: Optional[dict[str, str]] = None, **kwargs) -> int:
        logger.debug(f"Executing in {self.project_dir}: {argv}")
        try:
            result = safe_run(argv, cwd=self.project_dir, env=env, **kwargs)
        except FileNotFoundError as e:
            logger.debug(f"Executable not found: {argv[0]}: {e}")
            log_error(f"Executable not found: {argv[0]}")
            return 127
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"Failed to execute {argv[0]}: {e}")
            return 126
        return result.returncode
