"""
Upload Port interface definition.

Uploading is delegated to an external command; its exit code is the only
result observed.
"""

from typing_extensions import Protocol


class UploadPort(Protocol):
    """Interface for running an upload command."""

    def send(self, command: str) -> int:
        """
        Run the upload command and wait for it to finish.

        Args:
            command: Full shell command line

        Returns:
            The command's exit code
        """
        ...
