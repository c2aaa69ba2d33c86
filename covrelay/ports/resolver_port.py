"""
Resolver Port interface definition.

A resolver maps the logical path recorded in coverage data to a file on disk.
"""

from pathlib import Path

from typing_extensions import Protocol


class SourceResolver(Protocol):
    """Maps a logical source path to an on-disk path."""

    def __call__(self, logical_path: str) -> Path | None:
        """
        Resolve a logical path.

        Returns:
            The on-disk path, or None if the file cannot be found

        Raises:
            SourceNotFoundError: If the file is missing and missing files
                are not being ignored
        """
        ...


class ResolverFactory(Protocol):
    """Builds a resolver from the configured source directories."""

    def __call__(
        self, source_paths: list[str], ignore_missing: bool
    ) -> SourceResolver: ...
