"""Archival of retired segments: archive ladder shifting, eviction, and gzip compression."""

import gzip
import logging
import os
import shutil
from datetime import datetime, timezone

from compressed_rotating_log.errors import ErrorKind, OpResult
from compressed_rotating_log.fs import LocalFileSystem
from compressed_rotating_log.naming import (
    archive_pattern,
    calc_filename,
    shifted_archive_name,
    split_by_extension,
)
from compressed_rotating_log.retry import RetryPolicy, rename_file

logger = logging.getLogger(__name__)


def archive_timestamp(now: datetime) -> str:
    """Render *now* as the timestamp embedded in archive names."""
    return now.strftime("%Y%m%d_%H%M%S_") + f"{now.microsecond:06d}"


class GzipCompressor:
    suffix = ".gz"

    def __init__(self, level: int = 6):
        self._level = max(1, min(9, level))

    @property
    def level(self) -> int:
        return self._level

    def compress(self, destination: str, source: str) -> bool:
        """Gzip *source* into *destination*. Returns False instead of raising on failure."""
        try:
            with open(source, "rb") as f_in, gzip.open(
                destination, "wb", compresslevel=self._level
            ) as f_out:
                shutil.copyfileobj(f_in, f_out)
        except OSError:
            logger.exception("Compression of %s failed", source)
            try:
                os.remove(destination)
            except OSError:
                pass
            return False
        return True


class CompressionManager:
    """Keeps at most ``max_compressed_files`` archives behind the plaintext segments.

    Archive slots run from ``max_files`` to ``max_files + max_compressed_files - 1``.
    Each pass pushes every archive one slot up, drops whatever reaches the last
    slot, and compresses the plaintext segment sitting at ``max_files``.
    """

    def __init__(self, fs=None, compressor=None, time_func=None, retry: RetryPolicy | None = None):
        self._fs = fs or LocalFileSystem()
        self._compressor = compressor or GzipCompressor()
        self._time_func = time_func or (lambda: datetime.now(timezone.utc))
        self._retry = retry or RetryPolicy(attempts=2, delay=0.01)

    @property
    def suffix(self) -> str:
        return self._compressor.suffix

    def compress(self, state) -> OpResult:
        result = self.shift_archives(state)
        if result.fatal or state.max_compressed_files == 0:
            return result
        return self.compress_retired(state)

    def shift_archives(self, state) -> OpResult:
        folder, name = os.path.split(state.base_filename)
        folder = folder or "."
        basename, ext = split_by_extension(name)
        pattern = archive_pattern(basename, ext, self.suffix)

        try:
            entries = self._fs.listdir(folder)
        except FileNotFoundError:
            return OpResult.success()
        except OSError as e:
            message = f"Failed listing archive directory {folder}: {e}"
            logger.error(message)
            return OpResult.failure(ErrorKind.FATAL, message)

        # highest slot first, so no rename lands on an entry that has not moved yet
        matches = []
        for entry in entries:
            m = pattern.match(entry)
            if m:
                matches.append((int(m.group(1)), entry))
        matches.sort(reverse=True)

        # with archival disabled every leftover archive is out of range
        oldest = state.oldest_archive_slot if state.max_compressed_files else 0
        for index, entry in matches:
            path = os.path.join(folder, entry)
            if index >= oldest:
                try:
                    self._fs.remove(path)
                except OSError as e:
                    # the ladder must not grow past max_compressed_files
                    message = f"Failed evicting archive {path}: {e}"
                    logger.error(message)
                    return OpResult.failure(ErrorKind.FATAL, message)
                logger.info("Evicted archive %s", path)
                continue

            target = os.path.join(folder, shifted_archive_name(entry, basename, index))
            result = self._retry.run(lambda: rename_file(path, target, self._fs))
            if result.fatal:
                message = f"Failed renaming {path} to {target}"
                logger.error("%s (%s)", message, result.message)
                return OpResult.failure(ErrorKind.FATAL, message)
        return OpResult.success()

    def compress_retired(self, state) -> OpResult:
        source = calc_filename(state.base_filename, state.max_files)
        if not self._fs.exists(source):
            return OpResult.success()

        destination = f"{source}.{archive_timestamp(self._time_func())}{self.suffix}"
        if not self._compressor.compress(destination, source):
            logger.warning("Keeping plaintext %s, compression failed", source)
            return OpResult.failure(ErrorKind.CODEC_FAILURE, f"Failed compressing {source}")

        try:
            self._fs.remove(source)
        except OSError as e:
            logger.warning("Archived %s but could not remove it: %s", source, e)
        logger.info("Archived %s -> %s", source, destination)
        return OpResult.success()
