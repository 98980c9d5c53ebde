"""Checks that every test directory is reachable by pytest collection."""

import ast
import fnmatch
import re
from pathlib import Path

ROOT_DIR = Path(__file__).parent.parent.parent
TESTS_DIR = ROOT_DIR / "tests"


def _norecursedirs():
    text = (ROOT_DIR / "pyproject.toml").read_text(encoding="utf-8")
    match = re.search(r"^norecursedirs\s*=\s*(\[.*?\])", text, re.MULTILINE | re.DOTALL)
    assert match, "pyproject.toml must set norecursedirs; pytest's default skips build/"
    return ast.literal_eval(match.group(1))


class TestCollection:
    def test_build_is_not_excluded(self):
        """Test that the configured exclusions leave build/ collectable."""
        patterns = _norecursedirs()

        assert not any(fnmatch.fnmatch("build", pattern) for pattern in patterns)

    def test_every_test_directory_is_collected(self):
        """Test that no directory holding test modules matches an exclusion."""
        patterns = _norecursedirs()
        test_dirs = {p.parent for p in TESTS_DIR.rglob("test_*.py") if "__pycache__" not in p.parts}

        assert TESTS_DIR / "unit" / "build" in test_dirs
        skipped = [
            d
            for d in test_dirs
            for part in d.relative_to(TESTS_DIR).parts
            if any(fnmatch.fnmatch(part, pattern) for pattern in patterns)
        ]
        assert skipped == []
