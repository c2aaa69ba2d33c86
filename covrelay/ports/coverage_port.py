"""
Coverage Port interface definition.

This module defines the interface for loading collected coverage data,
producing the visitation counts and point table consumed by the reporter.
"""

from typing_extensions import Protocol

from ..domain.models import PointTable, VisitationMapping


class CoverageLoaderPort(Protocol):
    """
    Interface for loading coverage data from disk.

    Implementations read whatever data files their coverage tool writes and
    translate them into per-point visit counts.
    """

    def load_coverage(
        self,
        files: list[str],
        paths: list[str],
        expect: list[str],
        do_not_expect: list[str],
    ) -> tuple[VisitationMapping, PointTable]:
        """
        Load coverage data.

        Args:
            files: Explicit coverage data files
            paths: Directories searched recursively for coverage data files
            expect: Source paths that must be present in the data
            do_not_expect: Source paths exempted from ``expect``

        Returns:
            Tuple of (visit counts per file, point offsets per file)

        Raises:
            CoverageLoadError: If the data is missing or malformed
        """
        ...
