"""Size-triggered index-shift rotation of plaintext segments.

Rotate files::

    log.txt   -> log.1.txt
    log.1.txt -> log.2.txt
    log.2.txt -> log.3.txt
    log.3.txt -> replaced
"""

import logging
from dataclasses import dataclass

from compressed_rotating_log.errors import ErrorKind, OpResult
from compressed_rotating_log.fs import LocalFileSystem
from compressed_rotating_log.naming import calc_filename
from compressed_rotating_log.retry import RetryPolicy, rename_file

logger = logging.getLogger(__name__)


@dataclass
class RotationState:
    base_filename: str
    max_size: int
    max_files: int
    max_compressed_files: int
    current_size: int = 0

    def __post_init__(self):
        if self.max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {self.max_size}")
        if self.max_files < 1:
            raise ValueError(f"max_files must be >= 1, got {self.max_files}")
        if self.max_compressed_files < 0:
            raise ValueError(
                f"max_compressed_files must be >= 0, got {self.max_compressed_files}"
            )

    @property
    def oldest_archive_slot(self) -> int:
        return self.max_compressed_files + self.max_files - 1


class RotationController:
    """Owns the rotation state and shifts the segment chain when it is exceeded."""

    def __init__(self, state: RotationState, writer, fs=None, retry: RetryPolicy | None = None):
        self._state = state
        self._writer = writer
        self._fs = fs or LocalFileSystem()
        self._retry = retry or RetryPolicy(attempts=2, delay=0.1)

    @property
    def state(self) -> RotationState:
        return self._state

    def account(self, nbytes: int) -> bool:
        """Add *nbytes* to the active-segment counter. Returns True if rotation is due."""
        self._state.current_size += nbytes
        return self._state.current_size > self._state.max_size

    def reset(self, nbytes: int = 0):
        self._state.current_size = nbytes

    def rotate(self) -> OpResult:
        state = self._state
        self._writer.close()
        transient = False

        for i in range(state.max_files, 0, -1):
            src = calc_filename(state.base_filename, i - 1)
            if not self._fs.exists(src):
                continue
            target = calc_filename(state.base_filename, i)

            result = self._retry.run(lambda: rename_file(src, target, self._fs))
            if result.kind is ErrorKind.TRANSIENT:
                transient = True
            elif result.fatal:
                # truncate the active file anyway so it cannot grow beyond its limit
                self._writer.reopen(True)
                state.current_size = 0
                message = f"Failed renaming {src} to {target}"
                logger.error("%s (%s)", message, result.message)
                return OpResult.failure(ErrorKind.FATAL, message)

        self._writer.reopen(True)
        logger.info("Rotated %s (%d plaintext segment(s) kept)", state.base_filename, state.max_files)
        if transient:
            return OpResult.failure(ErrorKind.TRANSIENT, "rotation needed a rename retry")
        return OpResult.success()
