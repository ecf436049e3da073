"""Tests for the logging.Handler integration."""

import logging
import os

import pytest

from compressed_rotating_log.config import SinkConfig
from compressed_rotating_log.handler import CompressedRotatingFileHandler


@pytest.fixture()
def app_logger():
    logger = logging.getLogger("tests.app")
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    yield logger
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()


def test_records_are_formatted_into_active_file(log_path, app_logger):
    handler = CompressedRotatingFileHandler(log_path, 1024, 2, 2)
    handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    app_logger.addHandler(handler)

    app_logger.info("hello")
    app_logger.warning("careful")
    handler.flush()

    with open(log_path) as f:
        assert f.read() == "INFO hello\nWARNING careful\n"
    assert handler.baseFilename == log_path


def test_rotation_through_handler(tmp_path, log_path, app_logger):
    handler = CompressedRotatingFileHandler(log_path, 30, 1, 2)
    handler.setFormatter(logging.Formatter("%(message)s"))
    app_logger.addHandler(handler)

    for i in range(10):
        app_logger.info("message number %02d", i)
    handler.close()

    names = os.listdir(tmp_path)
    assert "app.log" in names
    assert "app.1.log" not in names  # compressed as soon as it reaches max_files
    assert 1 <= len([n for n in names if n.endswith(".gz")]) <= 2


def test_own_package_records_are_dropped(log_path):
    handler = CompressedRotatingFileHandler(log_path, 1024, 1, 1)
    own = logging.LogRecord("compressed_rotating_log.rotation", logging.INFO, __file__, 1,
                            "Rotated", None, None)
    other = logging.LogRecord("tests.app", logging.INFO, __file__, 1, "hi", None, None)

    assert not handler.filter(own)
    assert handler.filter(other)
    handler.close()


def test_sink_errors_go_to_handle_error(log_path, app_logger, monkeypatch):
    handler = CompressedRotatingFileHandler(log_path, 1024, 1, 1)
    app_logger.addHandler(handler)
    failures = []
    monkeypatch.setattr(handler, "handleError", failures.append)

    def boom(record):
        raise OSError("disk full")

    monkeypatch.setattr(handler.sink, "sink_it", boom)
    app_logger.error("lost")

    assert len(failures) == 1
    assert failures[0].getMessage() == "lost"


def test_from_config(tmp_path):
    cfg = SinkConfig(base_filename=str(tmp_path / "svc.log"), max_size_bytes=100,
                     max_files=2, max_compressed_files=2)
    handler = CompressedRotatingFileHandler.from_config(cfg, level=logging.WARNING)
    assert handler.level == logging.WARNING
    assert handler.baseFilename == str(tmp_path / "svc.log")
    handler.close()
