"""
Git adapter for reading commit metadata.

Implements VcsPort by shelling out to ``git``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ...domain.models import VcsError
from ..io.subprocess_safe import SubprocessError, run_subprocess_safe

logger = logging.getLogger(__name__)


class GitAdapter:
    """Reads metadata of the checked-out commit with the git command line."""

    def __init__(self, cwd: str | Path | None = None, timeout: float | None = 30) -> None:
        self._cwd = cwd
        self._timeout = timeout

    def head_field(self, pretty_format: str) -> str:
        return self._first_line(["git", "log", "-1", f"--pretty=format:{pretty_format}"])

    def branch(self) -> str:
        return self._first_line(["git", "rev-parse", "--abbrev-ref", "HEAD"])

    def _first_line(self, cmd: list[str]) -> str:
        try:
            with run_subprocess_safe(cmd, timeout=self._timeout, cwd=self._cwd) as (
                stdout,
                _,
            ):
                lines = stdout.splitlines()
        except (SubprocessError, OSError) as e:
            logger.debug(f"git failed: {e}")
            raise VcsError(f"command failed: '{' '.join(cmd)}'") from e

        # An empty subject or email is valid output.
        return lines[0] if lines else ""
