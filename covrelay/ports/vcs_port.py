"""
VCS Port interface definition.

This module defines the interface used to read metadata about the commit
being reported on.
"""

from typing_extensions import Protocol


class VcsPort(Protocol):
    """Interface for reading version-control metadata."""

    def head_field(self, pretty_format: str) -> str:
        """
        Read one field of the latest commit.

        Args:
            pretty_format: A ``git log --pretty=format:`` placeholder, e.g. ``%H``

        Raises:
            VcsError: If the underlying command fails
        """
        ...

    def branch(self) -> str:
        """
        Return the name of the current branch.

        Raises:
            VcsError: If the underlying command fails
        """
        ...
