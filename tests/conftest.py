"""Global fixtures and utilities for the covrelay test suite."""

import logging
from pathlib import Path

import pytest

from covrelay.adapters.io.logging_setup import LoggerManager
from tests.fakes import FakeUploader, FakeVcs


@pytest.fixture
def fake_vcs():
    return FakeVcs()


@pytest.fixture
def fake_uploader():
    return FakeUploader()


@pytest.fixture
def three_line_source(tmp_path: Path):
    """a.py with 3 lines: no point on line 1, two points on line 2, one on line 3.

    Returns (path, counts, offsets) giving [None, 2, 0].
    """
    content = b"# header\nx = 1; y = 2\nz = 3\n"
    path = tmp_path / "a.py"
    path.write_bytes(content)
    line2 = content.index(b"x")
    line3 = content.index(b"z")
    offsets = [line2, line2 + 7, line3]
    counts = [2, 0, 0]
    return path, counts, offsets


@pytest.fixture(autouse=True)
def reset_logging():
    """Let each test install its own logging handler."""
    yield
    LoggerManager.reset()
    logging.getLogger().setLevel(logging.WARNING)
