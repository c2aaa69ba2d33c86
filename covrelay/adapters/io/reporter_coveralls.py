"""
Coveralls-format JSON report writer.

The report is assembled line by line rather than through ``json.dumps`` of a
whole tree: the field order and layout are fixed because some consumers
parse the document naively. Individual values are still JSON-escaped.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import tempfile
from pathlib import Path

from ...application.line_mapping import file_report
from ...domain.models import (
    FileReport,
    GitHead,
    GitInfo,
    PointTable,
    ReportError,
    ServiceConfig,
    VisitationMapping,
)
from ...ports.resolver_port import SourceResolver
from ...ports.vcs_port import VcsPort

logger = logging.getLogger(__name__)

# Report field -> git log placeholder.
GIT_HEAD_FIELDS: list[tuple[str, str]] = [
    ("id", "%H"),
    ("author_name", "%an"),
    ("author_email", "%ae"),
    ("committer_name", "%cn"),
    ("committer_email", "%ce"),
    ("message", "%s"),
]

_REPO_PARAMS = [
    "service_name",
    "service_number",
    "service_job_id",
    "service_pull_request",
    "repo_token",
]


def collect_git_info(vcs: VcsPort) -> GitInfo:
    """Read the latest commit and current branch; any failure is fatal."""
    head = {field: vcs.head_field(placeholder) for field, placeholder in GIT_HEAD_FIELDS}
    return GitInfo(head=GitHead(**head), branch=vcs.branch())


def _indent(lines: list[str], width: int) -> list[str]:
    prefix = " " * width
    return [prefix + line for line in lines]


def render_file_report(report: FileReport, indent: int = 8) -> str:
    coverage = ",".join("null" if c is None else str(c) for c in report.coverage)
    lines = [
        "{",
        f"    \"name\": {json.dumps(report.name)},",
        f"    \"source_digest\": \"{report.source_digest}\",",
        f"    \"coverage\": [{coverage}]",
        "}",
    ]
    return "\n".join(_indent(lines, indent))


def render_git_info(git: GitInfo) -> str:
    head = ",".join(
        f"{json.dumps(field)}:{json.dumps(getattr(git.head, field))}"
        for field, _ in GIT_HEAD_FIELDS
    )
    return (
        f"    \"git\":{{\"head\":{{{head}}},"
        f"\"branch\":{json.dumps(git.branch)},\"remotes\":{{}}}},"
    )


class CoverallsReportWriter:
    """
    Builds the coverage report and writes it to its destination.

    The writer owns git metadata collection so that the report is only ever
    assembled from one consistent set of inputs.
    """

    def __init__(self, vcs: VcsPort) -> None:
        self._vcs = vcs

    def render(
        self,
        config: ServiceConfig,
        visited: VisitationMapping,
        points: PointTable,
        resolver: SourceResolver,
    ) -> str:
        """
        Render the full report document.

        Files the resolver cannot find are left out. Files appear in order of
        their logical path.

        Raises:
            VcsError: If git metadata is requested and a git command fails
        """
        sections = ["{"]

        for param in _REPO_PARAMS:
            value = getattr(config, param).strip()
            if value:
                sections.append(f"    \"{param}\": {json.dumps(value)},")

        if config.include_git:
            sections.append(render_git_info(collect_git_info(self._vcs)))

        if config.parallel:
            sections.append("    \"parallel\": true,")

        file_jsons = []
        for name in sorted(visited):
            report = file_report(name, resolver, visited[name], points.get(name, []))
            if report is not None:
                file_jsons.append(render_file_report(report))

        sections.append("    \"source_files\": [")
        if file_jsons:
            sections.append(",\n".join(file_jsons))
        sections.append("    ]")
        sections.append("}")
        return "\n".join(sections) + "\n"

    def write(
        self,
        config: ServiceConfig,
        visited: VisitationMapping,
        points: PointTable,
        resolver: SourceResolver,
    ) -> None:
        """Render the report and write it to ``config.to_file``."""
        if config.to_file != "-":
            self._ensure_parent(Path(config.to_file))

        content = self.render(config, visited, points, resolver)

        if config.to_file == "-":
            sys.stdout.write(content)
            sys.stdout.flush()
        else:
            self._write_atomic(Path(config.to_file), content)

    @staticmethod
    def _ensure_parent(path: Path) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ReportError(f"Cannot create directory {path.parent}: {e}") from e

    @staticmethod
    def _write_atomic(path: Path, content: str) -> None:
        """Write via a temp file in the same directory, then rename over ``path``."""
        temp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                suffix=".json",
                dir=path.parent,
                delete=False,
                encoding="utf-8",
            ) as temp_file:
                temp_path = Path(temp_file.name)
                temp_file.write(content)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            temp_path.replace(path)
            logger.debug(f"Wrote coverage report to {path}")
        except OSError as e:
            raise ReportError(f"Failed to write report {path}: {e}") from e
        finally:
            if temp_path is not None and temp_path.exists():
                temp_path.unlink()
