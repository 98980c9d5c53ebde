"""Incremental compilation cache.

This module decides which translation units must be recompiled. It keeps a
persistent mapping from source path to the source modification time (whole
seconds) observed when that source was last compiled successfully.

Cache file format (JSON):
    {"timestamps": {"util.cpp": 1718000000, "src/main.cpp": 1718000042}}

A missing, unreadable or malformed cache file is an empty cache. A failure
to write the cache is logged and otherwise ignored.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_CACHE_FILE = ".cxxcache"


def get_cache_file_name() -> str:
    """Cache file name, overridable with CXXBUILD_CACHE_FILE."""
    return os.environ.get("CXXBUILD_CACHE_FILE") or DEFAULT_CACHE_FILE


def _mtime_seconds(path: Path) -> int:
    return int(path.stat().st_mtime)


class CompileCache:
    """Tracks source modification times for incremental compilation.

    Keys are source paths as strings (relative to the project root); the
    paths passed to needs_rebuild() and update() are resolved against
    base_dir for stat calls.
    """

    def __init__(self, cache_file: Path, base_dir: Optional[Path] = None):
        """Initialize the compile cache.

        Args:
            cache_file: Path to the cache file (JSON format)
            base_dir: Directory relative source paths are resolved against
                (defaults to the cache file's directory)
        """
        self.cache_file = cache_file
        self.base_dir = base_dir if base_dir is not None else cache_file.parent
        self.timestamps: dict[str, int] = {}

    @classmethod
    def load(cls, cache_file: Path, base_dir: Optional[Path] = None) -> "CompileCache":
        """Load the cache from disk, treating any problem as an empty cache."""
        cache = cls(cache_file, base_dir)
        cache.timestamps = _read_timestamps(cache_file)
        return cache

    def save(self) -> bool:
        """Save the cache to disk atomically.

        Uses the temp file + rename pattern so an interrupted write never
        leaves a half-written cache behind.

        Returns:
            True if the cache was written, False if writing failed
        """
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            temp_file = self.cache_file.with_name(self.cache_file.name + ".tmp")
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump({"timestamps": self.timestamps}, f, indent=2, sort_keys=True)
            temp_file.replace(self.cache_file)
            logger.debug(f"Saved cache with {len(self.timestamps)} entries to {self.cache_file}")
            return True
        except OSError as e:
            logger.warning(f"Failed to save compile cache to {self.cache_file}: {e}")
            return False

    def _abs(self, path: Path) -> Path:
        return path if path.is_absolute() else self.base_dir / path

    def needs_rebuild(self, source: Path, object_path: Path) -> bool:
        """Check whether a source must be recompiled into its object.

        A source needs recompilation if:
        1. The object file doesn't exist
        2. The object file is older than the source (mtime check)
        3. The cached timestamp for the source differs from its current mtime

        Args:
            source: Source file path (cache key is its string form)
            object_path: Object file path

        Returns:
            True if recompilation is needed, False otherwise
        """
        source_abs = self._abs(source)
        object_abs = self._abs(object_path)

        if not object_abs.is_file():
            logger.debug(f"Object file missing: {object_path} - recompilation needed")
            return True

        try:
            source_mtime = source_abs.stat().st_mtime
            object_mtime = object_abs.stat().st_mtime
        except OSError as e:
            logger.debug(f"Failed to check file times: {e} - assuming recompilation needed")
            return True

        if object_mtime < source_mtime:
            logger.debug(f"Object file older than source: {object_path} - recompilation needed")
            return True

        cached = self.timestamps.get(_key(source))
        if cached != int(source_mtime):
            logger.debug(f"Cached timestamp {cached} differs for {source} - recompilation needed")
            return True

        logger.debug(f"Skipping unchanged file: {source}")
        return False

    def update(self, source: Path) -> None:
        """Record the source's current mtime after a successful compile."""
        try:
            self.timestamps[_key(source)] = _mtime_seconds(self._abs(source))
        except OSError as e:
            logger.warning(f"Cannot update cache for {source}: {e}")

    def __contains__(self, source: object) -> bool:
        if isinstance(source, Path):
            return _key(source) in self.timestamps
        return source in self.timestamps

    def __len__(self) -> int:
        return len(self.timestamps)


def _key(source: Path) -> str:
    return source.as_posix()


def _read_timestamps(cache_file: Path) -> dict[str, int]:
    if not cache_file.exists():
        logger.debug(f"Cache file not found: {cache_file}")
        return {}

    try:
        with open(cache_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        logger.warning(f"Ignoring unreadable compile cache {cache_file}: {e}")
        return {}

    raw = data.get("timestamps") if isinstance(data, dict) else None
    if not isinstance(raw, dict):
        logger.warning(f"Ignoring malformed compile cache {cache_file}")
        return {}

    timestamps: dict[str, int] = {}
    for key, value in raw.items():
        # bool is an int subclass; true/false are not timestamps
        if isinstance(key, str) and isinstance(value, int) and not isinstance(value, bool):
            timestamps[key] = value
    logger.debug(f"Loaded cache with {len(timestamps)} entries from {cache_file}")
    return timestamps
