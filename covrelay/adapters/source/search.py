"""
Source file search.

Coverage data records paths as the build saw them. The resolver built here
finds those files again under the configured source directories.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ...domain.models import SourceNotFoundError
from ...ports.resolver_port import SourceResolver

logger = logging.getLogger(__name__)


def search_file(source_paths: list[str], ignore_missing: bool) -> SourceResolver:
    """
    Build a resolver over ``source_paths``.

    Absolute paths resolve to themselves. Relative paths are tried under each
    source directory in order and the first existing file wins.

    Args:
        source_paths: Directories to search, in priority order
        ignore_missing: Return None for missing files instead of raising

    Returns:
        A callable mapping a logical path to an on-disk path or None
    """
    directories = [Path(p) for p in source_paths] or [Path(".")]

    def fail(logical_path: str) -> Path | None:
        if ignore_missing:
            return None
        raise SourceNotFoundError(
            f"Unable to find file '{logical_path}'. "
            "Use --ignore-missing-files to skip it, or --source-path to add "
            "the directory that contains it."
        )

    def resolve(logical_path: str) -> Path | None:
        candidate = Path(logical_path)
        if candidate.is_absolute():
            return candidate if candidate.is_file() else fail(logical_path)

        for directory in directories:
            path = directory / candidate
            if path.is_file():
                logger.debug(f"Resolved {logical_path} to {path}")
                return path
        return fail(logical_path)

    return resolve
