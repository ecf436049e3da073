"""Shared pytest fixtures for the compressed-rotating-log test suite."""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from compressed_rotating_log.fs import LocalFileSystem
from compressed_rotating_log.retry import RetryPolicy


class FlakyFileSystem(LocalFileSystem):
    """Real filesystem whose next ``rename_failures`` renames raise PermissionError."""

    def __init__(self, rename_failures: int = 0, listdir_error: OSError | None = None):
        self.rename_failures = rename_failures
        self.listdir_error = listdir_error
        self.renames: list[tuple[str, str]] = []

    def rename(self, src, target):
        if self.rename_failures > 0:
            self.rename_failures -= 1
            raise PermissionError(f"simulated failure renaming {src}")
        self.renames.append((src, target))
        super().rename(src, target)

    def listdir(self, path):
        if self.listdir_error is not None:
            raise self.listdir_error
        return super().listdir(path)


@pytest.fixture()
def flaky_fs():
    """Factory for filesystems that fail a given number of renames."""
    return FlakyFileSystem


@pytest.fixture()
def sleeps() -> list[float]:
    """Delays requested by retry policies built with ``fast_retry``."""
    return []


@pytest.fixture()
def fast_retry(sleeps):
    """A two-attempt retry policy that records its delays instead of sleeping."""
    return RetryPolicy(attempts=2, delay=0.1, sleep=sleeps.append)


@pytest.fixture()
def clock():
    """Deterministic clock advancing one second per call."""
    start = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
    ticks = itertools.count()
    return lambda: start + timedelta(seconds=next(ticks))


@pytest.fixture()
def log_path(tmp_path) -> str:
    return str(tmp_path / "app.log")
