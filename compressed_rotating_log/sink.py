"""Rotating file sink that archives retired segments.

Every write adds the formatted record size to the active segment counter. When
the counter passes ``max_size`` the plaintext chain is shifted, the segment
pushed to ``max_files`` is compressed, and the record lands in a fresh file.
"""

import logging
import threading

from compressed_rotating_log.compression import CompressionManager, GzipCompressor
from compressed_rotating_log.config import SinkConfig
from compressed_rotating_log.errors import CompressionError, RotationError, SinkError
from compressed_rotating_log.naming import calc_filename
from compressed_rotating_log.retry import RetryPolicy
from compressed_rotating_log.rotation import RotationController, RotationState
from compressed_rotating_log.writer import FileWriter

logger = logging.getLogger(__name__)


class NullLock:
    """Lock stand-in for sinks used from a single thread."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


def default_formatter(record) -> bytes:
    if isinstance(record, (bytes, bytearray)):
        return bytes(record)
    text = str(record)
    return (text if text.endswith("\n") else text + "\n").encode("utf-8")


class CompressedRotatingSink:
    def __init__(
        self,
        base_filename: str,
        max_size: int,
        max_files: int,
        max_compressed_files: int,
        rotate_on_open: bool = False,
        *,
        lock=None,
        formatter=None,
        writer=None,
        compressor=None,
        fs=None,
        time_func=None,
        rotate_retry: RetryPolicy | None = None,
        archive_retry: RetryPolicy | None = None,
    ):
        state = RotationState(base_filename, max_size, max_files, max_compressed_files)
        self._lock = lock if lock is not None else threading.Lock()
        self._formatter = formatter or default_formatter
        self._writer = writer or FileWriter()
        self._writer.open(calc_filename(base_filename, 0))
        self._rotation = RotationController(state, self._writer, fs=fs, retry=rotate_retry)
        self._compression = CompressionManager(
            fs=fs, compressor=compressor, time_func=time_func, retry=archive_retry,
        )
        # expensive, called only once
        self._rotation.reset(self._writer.size())

        if rotate_on_open and state.current_size > 0:
            logger.info("Rotating pre-existing %s (%d bytes) on open", base_filename, state.current_size)
            error = self._rotate_and_compress()
            self._rotation.reset(0)
            if error is not None:
                self._writer.close()
                raise error

    @classmethod
    def from_config(cls, config: SinkConfig, **kwargs) -> "CompressedRotatingSink":
        kwargs.setdefault("compressor", GzipCompressor(config.compression_level))
        kwargs.setdefault("rotate_retry", RetryPolicy(
            attempts=config.rename_retry_attempts,
            delay=config.rename_retry_delay_ms / 1000,
        ))
        kwargs.setdefault("archive_retry", RetryPolicy(
            attempts=config.rename_retry_attempts,
            delay=config.archive_retry_delay_ms / 1000,
        ))
        return cls(
            config.base_filename,
            config.max_size_bytes,
            config.max_files,
            config.max_compressed_files,
            config.rotate_on_open,
            **kwargs,
        )

    @property
    def filename(self) -> str:
        return self._writer.filename

    @property
    def current_size(self) -> int:
        return self._rotation.state.current_size

    def sink_it(self, record):
        """Format and append *record*, rotating and archiving first when the segment is full.

        Raises RotationError or CompressionError after the record has been written
        if the rotation cycle it triggered failed.
        """
        with self._lock:
            data = self._formatter(record)
            error = None
            if self._rotation.account(len(data)):
                error = self._rotate_and_compress()
                self._rotation.reset(len(data))
            self._writer.write(data)
            if error is not None:
                raise error

    def flush(self):
        with self._lock:
            self._writer.flush()

    def close(self):
        with self._lock:
            self._writer.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _rotate_and_compress(self) -> SinkError | None:
        result = self._rotation.rotate()
        if result.fatal:
            return RotationError(result.message, result.kind)
        result = self._compression.compress(self._rotation.state)
        if result.fatal:
            return CompressionError(result.message, result.kind)
        return None


def compressed_rotating_sink_mt(base_filename, max_size, max_files, max_compressed_files,
                                rotate_on_open=False, **kwargs) -> CompressedRotatingSink:
    return CompressedRotatingSink(base_filename, max_size, max_files, max_compressed_files,
                                  rotate_on_open, lock=threading.Lock(), **kwargs)


def compressed_rotating_sink_st(base_filename, max_size, max_files, max_compressed_files,
                                rotate_on_open=False, **kwargs) -> CompressedRotatingSink:
    return CompressedRotatingSink(base_filename, max_size, max_files, max_compressed_files,
                                  rotate_on_open, lock=NullLock(), **kwargs)
