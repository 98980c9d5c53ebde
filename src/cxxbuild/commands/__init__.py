"""Command implementations for the cxx CLI.

This package contains the actions that sit beside the build itself:
artifact cleanup and qmake project file generation.
"""

from cxxbuild.commands.clean import clean_artifacts
from cxxbuild.commands.qmake_project import QmakeProjectError, generate_pro_file

__all__ = ["QmakeProjectError", "clean_artifacts", "generate_pro_file"]
