"""
IO adapters.

Report writing, subprocess execution and logging setup.
"""

from . import subprocess_safe
from .logging_setup import LoggerManager, setup_logging
from .reporter_coveralls import CoverallsReportWriter, collect_git_info

__all__ = [
    "CoverallsReportWriter",
    "LoggerManager",
    "collect_git_info",
    "setup_logging",
    "subprocess_safe",
]
