"""
Coverage.py adapter for loading collected coverage data.

This adapter implements CoverageLoaderPort on top of the data files written by
coverage.py. Each executable statement becomes one point located at the start
of its line; a point's count is the number of data files in which the line ran.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Any

from ...application.line_mapping import line_start_offsets
from ...domain.models import CoverageLoadError, PointTable, VisitationMapping

logger = logging.getLogger(__name__)


class CoveragePyLoader:
    """
    Coverage loader using the coverage.py library.

    Implements CoverageLoaderPort.
    """

    DATA_FILE_NAME = ".coverage"

    def __init__(self, root: str | Path | None = None) -> None:
        """
        Initialize the coverage loader.

        Args:
            root: Directory logical paths are made relative to (default: cwd)

        Raises:
            ImportError: If coverage.py is not installed
        """
        try:
            import coverage
            from coverage.exceptions import CoverageException

            self._coverage_module = coverage
            self._coverage_exception: type[Exception] = CoverageException
        except ImportError as e:
            raise ImportError(
                "coverage.py is required but not installed. "
                "Install it with: pip install coverage"
            ) from e

        self._root = Path(root).resolve() if root else Path.cwd().resolve()

    def load_coverage(
        self,
        files: list[str],
        paths: list[str],
        expect: list[str],
        do_not_expect: list[str],
    ) -> tuple[VisitationMapping, PointTable]:
        data_files = self._find_data_files(files, paths)
        logger.debug(f"Reading coverage data from {len(data_files)} file(s)")

        hits: dict[str, Counter[int]] = {}
        for data_file in data_files:
            data = self._read_data_file(data_file)
            for measured in data.measured_files():
                counter = hits.setdefault(measured, Counter())
                counter.update(set(data.lines(measured) or []))

        analyzer = self._coverage_module.Coverage(
            data_file=str(data_files[0]), config_file=False
        )
        analyzer.load()

        visited: VisitationMapping = {}
        points: PointTable = {}
        for measured, counter in hits.items():
            statements = self._statements(analyzer, measured)
            offsets = self._statement_offsets(Path(measured), statements)
            name = self._logical_path(measured)
            points[name] = [offset for _, offset in offsets]
            visited[name] = [counter.get(line, 0) for line, _ in offsets]

        self._check_expected(set(visited), expect, do_not_expect)
        return visited, points

    def _find_data_files(self, files: list[str], paths: list[str]) -> list[Path]:
        data_files = []
        for name in files:
            path = Path(name)
            if not path.is_file():
                raise CoverageLoadError(f"Coverage data file '{name}' does not exist")
            data_files.append(path)

        for directory in paths:
            found = sorted(
                p
                for p in Path(directory).rglob(f"{self.DATA_FILE_NAME}*")
                if p.is_file()
                and (
                    p.name == self.DATA_FILE_NAME
                    or p.name.startswith(f"{self.DATA_FILE_NAME}.")
                )
            )
            data_files.extend(found)

        if not data_files:
            default = self._root / self.DATA_FILE_NAME
            if default.is_file():
                data_files.append(default)
            else:
                raise CoverageLoadError("No coverage data files found")
        return data_files

    def _read_data_file(self, path: Path) -> Any:
        data = self._coverage_module.CoverageData(basename=str(path))
        try:
            data.read()
        except (self._coverage_exception, OSError) as e:
            raise CoverageLoadError(
                f"Failed to read coverage data from '{path}': {e}"
            ) from e
        return data

    def _statements(self, analyzer: Any, measured: str) -> list[int]:
        try:
            _, statements, _, _, _ = analyzer.analysis2(measured)
        except self._coverage_exception as e:
            logger.debug(f"No statements available for {measured}: {e}")
            return []
        return sorted(statements)

    @staticmethod
    def _statement_offsets(
        source: Path, statements: list[int]
    ) -> list[tuple[int, int]]:
        """Pair each statement line with the byte offset at which it starts."""
        if not statements:
            return []
        try:
            starts = line_start_offsets(source.read_bytes())
        except OSError:
            return []
        return [(line, starts[line - 1]) for line in statements if line <= len(starts)]

    def _logical_path(self, measured: str) -> str:
        path = Path(measured)
        if not path.is_absolute():
            path = self._root / path
        try:
            return path.resolve().relative_to(self._root).as_posix()
        except ValueError:
            return path.as_posix()

    def _check_expected(
        self, present: set[str], expect: list[str], do_not_expect: list[str]
    ) -> None:
        if not expect:
            return

        excluded = self._expand(do_not_expect)
        missing = sorted(self._expand(expect) - excluded - present)
        if missing:
            listing = "\n".join(f"  {name}" for name in missing)
            raise CoverageLoadError(f"Expected files missing from coverage data:\n{listing}")

    def _expand(self, patterns: list[str]) -> set[str]:
        """Expand path patterns; a trailing '/' means every .py file below."""
        names = set()
        for pattern in patterns:
            if pattern.endswith("/"):
                for path in (self._root / pattern).rglob("*.py"):
                    names.add(self._logical_path(str(path)))
            else:
                names.add(self._logical_path(pattern))
        return names
