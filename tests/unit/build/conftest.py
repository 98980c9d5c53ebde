"""Fixtures for build pipeline tests."""

import pytest

from build_helpers import RecordingRunner


@pytest.fixture
def project(tmp_path):
    """Empty project directory."""
    project_dir = tmp_path / "project"
    project_dir.mkdir()
    return project_dir


@pytest.fixture
def runner(project):
    return RecordingRunner(project)
