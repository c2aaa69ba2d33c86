"""
Per-file digest and line mapping.

Turns the visit counts recorded for a file's points into one entry per source
line, the shape coverage services expect.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterator
from pathlib import Path

from ..domain.models import FileReport, LineCoverage, ReportError
from ..ports.resolver_port import SourceResolver

logger = logging.getLogger(__name__)


def source_digest(content: bytes) -> str:
    """Return the MD5 digest of ``content`` as lowercase hex."""
    return hashlib.md5(content).hexdigest()


def _lines(content: bytes) -> Iterator[bytes]:
    """Yield the lines of ``content`` without their newline.

    A trailing newline does not start an extra line.
    """
    if not content:
        return
    lines = content.split(b"\n")
    if lines[-1] == b"":
        lines.pop()
    yield from lines


def line_start_offsets(content: bytes) -> list[int]:
    """Return the byte offset at which each line of ``content`` starts."""
    offsets = []
    position = 0
    for line in _lines(content):
        offsets.append(position)
        position += len(line) + 1
    return offsets


def line_counts(content: bytes, counts: list[int], offsets: list[int]) -> LineCoverage:
    """
    Map point visit counts onto source lines.

    A point belongs to the line whose range, newline included, contains its
    offset. Lines without points map to None; other lines map to the sum of
    the counts of their points. Points without a count are ignored.

    Args:
        content: Full byte content of the source file
        counts: Visit count of each point, by point index
        offsets: Byte offset of each point, by point index

    Returns:
        One entry per line of ``content``
    """
    points = sorted((offset, index) for index, offset in enumerate(offsets))
    result: LineCoverage = []
    cursor = 0
    position = 0

    for line in _lines(content):
        end_of_line = position + len(line)
        total: int | None = None
        while cursor < len(points) and points[cursor][0] <= end_of_line:
            _, index = points[cursor]
            cursor += 1
            if index < len(counts):
                total = (total or 0) + counts[index]
        result.append(total)
        position = end_of_line + 1

    return result


def file_report(
    logical_path: str,
    resolver: SourceResolver,
    counts: list[int],
    offsets: list[int],
) -> FileReport | None:
    """
    Build the report fragment for one file.

    Returns None when the resolver cannot find the file, in which case the
    caller leaves the file out of the report.
    """
    logger.info("Processing file '%s'...", logical_path)
    resolved = resolver(logical_path)
    if resolved is None:
        logger.info("... file not found")
        return None

    try:
        content = Path(resolved).read_bytes()
    except OSError as e:
        raise ReportError(f"Cannot read source file '{resolved}': {e}") from e
    return FileReport(
        name=logical_path,
        source_digest=source_digest(content),
        coverage=line_counts(content, counts, offsets),
    )
