"""Version-control adapters."""

from .git_adapter import GitAdapter

__all__ = ["GitAdapter"]
