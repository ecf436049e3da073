"""Delete-then-rename with a caller-controlled retry policy."""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from compressed_rotating_log.errors import ErrorKind, OpResult
from compressed_rotating_log.fs import LocalFileSystem

logger = logging.getLogger(__name__)


def rename_file(src: str, target: str, fs=None) -> bool:
    """Delete *target* if it exists, then rename *src* to it. Returns True on success."""
    fs = fs or LocalFileSystem()
    try:
        fs.remove(target)
    except OSError:
        pass
    try:
        fs.rename(src, target)
    except OSError as e:
        logger.debug("Rename %s -> %s failed: %s", src, target, e)
        return False
    return True


@dataclass(frozen=True)
class RetryPolicy:
    """Run an operation up to ``attempts`` times, sleeping ``delay`` seconds between tries."""

    attempts: int = 2
    delay: float = 0.1
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False)

    def __post_init__(self):
        if self.attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {self.attempts}")

    def run(self, op: Callable[[], bool]) -> OpResult:
        """Return OK on first-try success, TRANSIENT if a retry succeeded, FATAL otherwise."""
        for attempt in range(1, self.attempts + 1):
            if op():
                if attempt == 1:
                    return OpResult.success()
                logger.debug("Operation succeeded on attempt %d", attempt)
                return OpResult.failure(ErrorKind.TRANSIENT, f"succeeded on attempt {attempt}")
            if attempt < self.attempts:
                self.sleep(self.delay)
        return OpResult.failure(ErrorKind.FATAL, f"failed after {self.attempts} attempt(s)")
