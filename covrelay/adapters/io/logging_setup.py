"""
Logging setup with Rich integration.

All modules log through the standard ``logging`` module; this configures the
root logger once with a RichHandler writing to standard error, so that the
report itself can go to standard output untouched.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler


class LoggerManager:
    """Owns the process-wide logging configuration."""

    _console: Console | None = None
    _setup_complete = False

    @classmethod
    def setup_global_logging(
        cls, console: Console | None = None, level: int = logging.INFO
    ) -> None:
        """Install the Rich handler on the root logger, once."""
        if cls._setup_complete:
            logging.getLogger().setLevel(level)
            return

        cls._console = console or Console(stderr=True)
        root_logger = logging.getLogger()

        for handler in list(root_logger.handlers):
            if isinstance(handler, RichHandler):
                root_logger.removeHandler(handler)

        rich_handler = RichHandler(
            console=cls._console,
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        rich_handler.setFormatter(logging.Formatter(fmt="%(message)s"))

        root_logger.addHandler(rich_handler)
        root_logger.setLevel(level)
        cls._setup_complete = True

    @classmethod
    def level_for(cls, verbose: bool = False, quiet: bool = False) -> int:
        """Pick the root level: quiet > verbose > default."""
        if quiet or os.getenv("COVRELAY_QUIET", "").lower() in {"1", "true", "yes"}:
            return logging.WARNING
        if verbose:
            return logging.DEBUG
        return logging.INFO

    @classmethod
    def reset(cls) -> None:
        """Forget the configuration; the next setup call reinstalls the handler."""
        cls._setup_complete = False
        cls._console = None


def setup_logging(
    console: Console | None = None, verbose: bool = False, quiet: bool = False
) -> logging.Logger:
    """Set up logging and return the CLI's logger."""
    LoggerManager.setup_global_logging(
        console, LoggerManager.level_for(verbose=verbose, quiet=quiet)
    )
    return logging.getLogger("covrelay.main")
