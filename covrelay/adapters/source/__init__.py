"""Source file resolution adapters."""

from .search import search_file

__all__ = ["search_file"]
