"""Package hints for missing headers.

This package maps headers the project cannot find to distribution packages
and pulls compile/link flags for them from pkg-config.
"""

from .hint_engine import HintReport, MissingHeadersError, PackageHintEngine
from .package_hints import PackageHint, resolve
from .pkg_config import ClassifiedFlags, PkgConfig, classify_flags
from .platform_detect import PlatformFamily, PlatformIdentity, detect_platform

__all__ = [
    "ClassifiedFlags",
    "HintReport",
    "MissingHeadersError",
    "PackageHint",
    "PackageHintEngine",
    "PkgConfig",
    "PlatformFamily",
    "PlatformIdentity",
    "classify_flags",
    "detect_platform",
    "resolve",
]
