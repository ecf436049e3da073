"""logging.Handler that writes through a CompressedRotatingSink."""

import logging

from compressed_rotating_log.config import SinkConfig
from compressed_rotating_log.sink import CompressedRotatingSink

_PACKAGE = __name__.split(".")[0]


class _SkipOwnRecords(logging.Filter):
    """Drop records from this package; they are emitted while the sink lock is held."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not (record.name == _PACKAGE or record.name.startswith(_PACKAGE + "."))


class CompressedRotatingFileHandler(logging.Handler):
    def __init__(self, filename: str, max_bytes: int, max_files: int, max_compressed_files: int,
                 rotate_on_open: bool = False, level=logging.NOTSET, sink=None, **sink_kwargs):
        super().__init__(level)
        self.sink = sink or CompressedRotatingSink(
            filename, max_bytes, max_files, max_compressed_files, rotate_on_open, **sink_kwargs,
        )
        self.addFilter(_SkipOwnRecords())

    @classmethod
    def from_config(cls, config: SinkConfig, level=logging.NOTSET) -> "CompressedRotatingFileHandler":
        sink = CompressedRotatingSink.from_config(config)
        return cls(config.base_filename, config.max_size_bytes, config.max_files,
                   config.max_compressed_files, level=level, sink=sink)

    @property
    def baseFilename(self) -> str:
        return self.sink.filename

    def emit(self, record: logging.LogRecord):
        try:
            self.sink.sink_it(self.format(record))
        except Exception:
            self.handleError(record)

    def flush(self):
        self.sink.flush()

    def close(self):
        try:
            self.sink.close()
        finally:
            super().close()
