"""cxxbuild - zero-configuration builds for C and C++ source directories.

Point it at a directory of sources and it discovers what to compile, decides
what is stale, hints at packages for missing headers and produces an
executable without a build script.
"""

__version__ = "2.0.7"

__all__ = ["__version__"]
