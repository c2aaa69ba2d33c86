"""Upload adapter running the service's command through the shell."""

from __future__ import annotations

import logging

from ...domain.models import CovRelayError
from ..io.subprocess_safe import SubprocessError, run_subprocess_passthrough

logger = logging.getLogger(__name__)


class UploadError(CovRelayError):
    """Raised when the upload command cannot be run at all."""

    pass


class ShellUploadAdapter:
    """Implements UploadPort; the command's own exit code is returned as-is."""

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    def send(self, command: str) -> int:
        try:
            returncode = run_subprocess_passthrough(
                command, timeout=self._timeout, shell=True
            )
        except (SubprocessError, OSError) as e:
            raise UploadError(f"upload command could not be run: {e}") from e

        logger.debug(f"Upload command exited with {returncode}")
        return returncode
