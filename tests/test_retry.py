"""Tests for rename_file and RetryPolicy."""

import pytest

from compressed_rotating_log.errors import ErrorKind
from compressed_rotating_log.retry import RetryPolicy, rename_file


class TestRenameFile:
    def test_renames_into_free_target(self, tmp_path):
        src = tmp_path / "a.log"
        src.write_text("hello")
        target = tmp_path / "a.1.log"

        assert rename_file(str(src), str(target)) is True
        assert not src.exists()
        assert target.read_text() == "hello"

    def test_replaces_existing_target(self, tmp_path):
        src = tmp_path / "a.log"
        src.write_text("new")
        target = tmp_path / "a.1.log"
        target.write_text("old")

        assert rename_file(str(src), str(target)) is True
        assert target.read_text() == "new"

    def test_missing_source_returns_false(self, tmp_path):
        assert rename_file(str(tmp_path / "missing"), str(tmp_path / "target")) is False

    def test_uses_injected_filesystem(self, tmp_path, flaky_fs):
        src = tmp_path / "a.log"
        src.write_text("x")
        fs = flaky_fs(rename_failures=1)

        assert rename_file(str(src), str(tmp_path / "b.log"), fs) is False
        assert rename_file(str(src), str(tmp_path / "b.log"), fs) is True
        assert fs.renames == [(str(src), str(tmp_path / "b.log"))]


class TestRetryPolicy:
    def test_first_attempt_success_does_not_sleep(self):
        sleeps = []
        policy = RetryPolicy(attempts=2, delay=0.1, sleep=sleeps.append)

        result = policy.run(lambda: True)

        assert result.kind is ErrorKind.OK
        assert sleeps == []

    def test_success_after_retry_is_transient(self):
        sleeps = []
        outcomes = iter([False, True])
        policy = RetryPolicy(attempts=2, delay=0.1, sleep=sleeps.append)

        result = policy.run(lambda: next(outcomes))

        assert result.kind is ErrorKind.TRANSIENT
        assert result.ok
        assert sleeps == [0.1]

    def test_exhausted_attempts_are_fatal(self):
        sleeps = []
        calls = []
        policy = RetryPolicy(attempts=3, delay=0.01, sleep=sleeps.append)

        result = policy.run(lambda: calls.append(1) or False)

        assert result.fatal
        assert not result.ok
        assert len(calls) == 3
        assert sleeps == [0.01, 0.01]

    def test_attempts_must_be_positive(self):
        with pytest.raises(ValueError):
            RetryPolicy(attempts=0)
