"""Coverage adapters for loading collected coverage data."""

from .coverage_py_adapter import CoveragePyLoader

__all__ = ["CoveragePyLoader"]
