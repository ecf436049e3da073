"""Result values passed between sink layers and the exceptions the sink raises."""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    OK = "ok"
    TRANSIENT = "transient"
    FATAL = "fatal"
    CODEC_FAILURE = "codec_failure"


@dataclass(frozen=True)
class OpResult:
    kind: ErrorKind = ErrorKind.OK
    message: str = ""

    @property
    def ok(self) -> bool:
        # a retried-then-successful operation counts as success
        return self.kind in (ErrorKind.OK, ErrorKind.TRANSIENT)

    @property
    def fatal(self) -> bool:
        return self.kind is ErrorKind.FATAL

    @classmethod
    def success(cls) -> "OpResult":
        return cls()

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "OpResult":
        return cls(kind=kind, message=message)


class SinkError(Exception):
    """Fatal error surfaced to the caller of a sink write."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.FATAL):
        super().__init__(message)
        self.kind = kind


class RotationError(SinkError):
    """Renaming the plaintext segment chain failed after all retries."""


class CompressionError(SinkError):
    """The archive pass could not enumerate or shift existing archives."""
