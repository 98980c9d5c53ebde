"""
Build system components for cxxbuild.

This package provides the build pipeline:
- Source discovery and classification (source_scanner)
- Include scanning and header resolution (include_scanner, header_resolver)
- Incremental compilation cache (compile_cache)
- Command assembly and execution (commands, toolchain_runner)
- Strategy selection and test sequencing (planner)
- The build run as a whole (orchestrator)

Only leaf modules are re-exported here; import the orchestrator from
cxxbuild.build.orchestrator.
"""

from .compile_cache import CompileCache
from .source_scanner import SourceCollection, SourceFile, SourceKind, SourceScanner

__all__ = [
    "CompileCache",
    "SourceCollection",
    "SourceFile",
    "SourceKind",
    "SourceScanner",
]
