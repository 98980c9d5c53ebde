"""Pytest configuration and fixtures for cxxbuild tests.

Restores stdout/stderr and the output module's state after each test so one
test redirecting output cannot break the next.
"""

import sys

import pytest


@pytest.fixture(autouse=True)
def _restore_stdio():  # noqa: PT004
    """Ensure stdout/stderr and the output module are restored after each test."""
    yield

    if sys.stdout.closed:
        sys.stdout = sys.__stdout__
    if sys.stderr.closed:
        sys.stderr = sys.__stderr__

    from cxxbuild import output

    output._output_stream = None
    output._verbose = False


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep CXXBUILD_* variables from the developer's shell out of tests."""
    for name in ("CXXBUILD_CACHE_FILE", "CXXBUILD_DOCKER_IMAGE", "CXXBUILD_PKG_CONFIG"):
        monkeypatch.delenv(name, raising=False)
