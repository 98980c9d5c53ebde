"""Static checks that production code reports through logging and output.py.

User-facing lines go through cxxbuild.output (timestamped) or the CLI;
diagnostics go through a module-level logger.
"""

import re
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).parent.parent.parent / "src"


def _python_files():
    files = [p for p in SRC_DIR.rglob("*.py") if "__pycache__" not in p.parts]
    assert files, f"No Python files found in {SRC_DIR}"
    return files


class TestLoggingCompliance:
    def test_no_bare_print_outside_cli(self):
        """Only cli.py may print() directly."""
        violations = []
        for file_path in _python_files():
            if file_path.name == "cli.py":
                continue
            for line_num, line in enumerate(file_path.read_text(encoding="utf-8").splitlines(), start=1):
                if line.strip().startswith("#"):
                    continue
                if re.search(r"(?<![\w.])print\s*\(", line):
                    violations.append(f"{file_path}:{line_num}: {line.strip()}")

        if violations:
            pytest.fail("Use cxxbuild.output or logging instead of print():\n" + "\n".join(violations))

    def test_module_loggers_use_module_name(self):
        """Modules that log define logger = logging.getLogger(__name__)."""
        missing = []
        for file_path in _python_files():
            content = file_path.read_text(encoding="utf-8")
            if re.search(r"^\s*logger\.(debug|info|warning|error)\(", content, re.MULTILINE):
                if "logger = logging.getLogger(__name__)" not in content:
                    missing.append(str(file_path))

        if missing:
            pytest.fail("Files logging without a module logger:\n" + "\n".join(missing))
