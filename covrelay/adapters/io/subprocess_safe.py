"""
Blocking subprocess execution utilities.

Git metadata and uploads both run as child processes that the caller waits
on. This module wraps :mod:`subprocess` so that a process is never left
running behind an exception, and so that failures surface as typed errors.

## Usage Examples

### Capture the output of a command:
```python
from covrelay.adapters.io.subprocess_safe import run_subprocess_safe

with run_subprocess_safe(["git", "rev-parse", "HEAD"]) as (stdout, stderr):
    print(stdout)
```

### Run a command with the terminal attached and keep its exit code:
```python
from covrelay.adapters.io.subprocess_safe import run_subprocess_passthrough

code = run_subprocess_passthrough("curl -L https://example.com", shell=True)
```

A ``timeout`` of None waits for as long as the command runs.
"""

import contextlib
import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class SubprocessError(Exception):
    """Base exception for subprocess-related errors."""

    pass


class SubprocessTimeoutError(SubprocessError):
    """Raised when a subprocess operation times out."""

    pass


class SubprocessExecutionError(SubprocessError):
    """Raised when a subprocess returns a non-zero exit code."""

    def __init__(self, message: str, returncode: int = 1):
        super().__init__(message)
        self.returncode = returncode


def _terminate(proc: subprocess.Popen, cmd: list[str] | str) -> None:
    """Stop ``proc`` if it is still running, escalating to kill."""
    if proc.poll() is not None:
        return
    try:
        proc.terminate()
    except ProcessLookupError:
        return
    try:
        proc.wait(timeout=5)
    except subprocess.TimeoutExpired:
        logger.warning(f"Force killing stubborn process: {cmd}")
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        proc.wait()


@contextlib.contextmanager
def run_subprocess_safe(
    cmd: list[str],
    timeout: float | None = None,
    cwd: str | Path | None = None,
    env: dict[str, str] | None = None,
):
    """
    Run a command, capturing its output.

    Args:
        cmd: Command and arguments to execute
        timeout: Maximum time to wait in seconds, None to wait indefinitely
        cwd: Working directory for the subprocess
        env: Environment variables for the subprocess

    Yields:
        tuple: (stdout, stderr) from the command

    Raises:
        SubprocessTimeoutError: If command exceeds timeout
        SubprocessExecutionError: If command returns non-zero exit code
        OSError: If command cannot be executed
    """
    proc = subprocess.Popen(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        cwd=cwd,
        env=env,
        start_new_session=True,
    )

    try:
        try:
            stdout, stderr = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning(f"Command {cmd} timed out after {timeout} seconds")
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            proc.communicate()
            raise SubprocessTimeoutError(
                f"Command {cmd} timed out after {timeout} seconds"
            ) from None

        if proc.returncode != 0:
            raise SubprocessExecutionError(
                f"Command {cmd} failed with exit code {proc.returncode}. "
                f"Stderr: {stderr}",
                returncode=proc.returncode,
            )
        yield stdout, stderr

    finally:
        _terminate(proc, cmd)


def run_subprocess_passthrough(
    cmd: list[str] | str,
    timeout: float | None = None,
    cwd: str | Path | None = None,
    shell: bool = False,
) -> int:
    """
    Run a command attached to the parent's standard streams.

    Args:
        cmd: Command to execute; a string when ``shell`` is True
        timeout: Maximum time to wait in seconds, None to wait indefinitely
        cwd: Working directory for the subprocess
        shell: Run ``cmd`` through the system shell

    Returns:
        The command's exit code

    Raises:
        SubprocessTimeoutError: If command exceeds timeout
        OSError: If command cannot be executed
    """
    proc = subprocess.Popen(cmd, cwd=cwd, shell=shell)
    try:
        return proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.warning(f"Command {cmd} timed out after {timeout} seconds")
        raise SubprocessTimeoutError(
            f"Command {cmd} timed out after {timeout} seconds"
        ) from None
    finally:
        _terminate(proc, cmd)
