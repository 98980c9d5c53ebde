"""
Docker utilities for Windows cross-compilation.

Cross-compiled builds run the usual compiler command inside a MinGW
container: the project directory is mounted read-write at a fixed path and
used as the working directory, so relative source and object paths in the
command line stay valid inside the container.
"""

import os
import subprocess
from pathlib import Path
from typing import List, Sequence

from .subprocess_utils import find_executable, safe_run

DEFAULT_IMAGE = "jhasse/mingw:latest"
CONTAINER_WORKDIR = "/home"


class SandboxUnavailableError(Exception):
    """Raised when cross-compilation is requested but Docker is unusable."""
    pass


def get_docker_image() -> str:
    """Cross-compilation image, overridable with CXXBUILD_DOCKER_IMAGE."""
    return os.environ.get("CXXBUILD_DOCKER_IMAGE") or DEFAULT_IMAGE


def get_docker_env() -> dict[str, str]:
    """Get environment for Docker commands, handling Git Bash/MSYS2 path conversion."""
    env = os.environ.copy()
    # Only set MSYS_NO_PATHCONV if we're in a Git Bash/MSYS2 environment
    if "MSYSTEM" in os.environ or "bash.exe" in os.environ.get("SHELL", ""):
        env["MSYS_NO_PATHCONV"] = "1"
    return env


def check_docker_installed() -> bool:
    """Check if the docker client is installed and answers.

    Returns:
        True if Docker is installed, False otherwise
    """
    if find_executable("docker") is None:
        return False
    try:
        result = safe_run(
            ["docker", "--version"],
            capture_output=True,
            timeout=5,
            env=get_docker_env(),
        )
        return result.returncode == 0
    except (subprocess.SubprocessError, OSError):
        return False


def wrap_command(argv: Sequence[str], project_dir: Path, image: str | None = None) -> List[str]:
    """Wrap a toolchain command so it runs inside the cross-compile container.

    Args:
        argv: Command to run inside the container
        project_dir: Host directory mounted at the container working directory
        image: Docker image (defaults to get_docker_image())

    Returns:
        The docker command line
    """
    image = image or get_docker_image()
    mount = f"{project_dir.resolve()}:{CONTAINER_WORKDIR}"
    return ["docker", "run", "-v", mount, "-w", CONTAINER_WORKDIR, "--rm", image, *argv]
