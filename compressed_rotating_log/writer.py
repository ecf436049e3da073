"""Append-only binary file writer used for the active segment."""

import os


class FileWriter:
    def __init__(self):
        self._file = None
        self._filename = None

    @property
    def filename(self) -> str | None:
        return self._filename

    def open(self, filename: str, truncate: bool = False):
        """Open *filename* for appending, creating parent directories as needed."""
        self.close()
        folder = os.path.dirname(filename)
        if folder:
            os.makedirs(folder, exist_ok=True)
        self._file = open(filename, "wb" if truncate else "ab")
        self._filename = filename

    def reopen(self, truncate: bool):
        if self._filename is None:
            raise RuntimeError("Failed re opening file - was not opened before")
        self.open(self._filename, truncate)

    def write(self, data: bytes):
        if self._file is None:
            raise RuntimeError(f"Failed writing to file {self._filename}: not open")
        self._file.write(data)

    def flush(self):
        if self._file is not None:
            self._file.flush()

    def close(self):
        if self._file and not self._file.closed:
            self._file.close()
        self._file = None

    def size(self) -> int:
        if self._file is None:
            raise RuntimeError(f"Cannot use size() on closed file {self._filename}")
        self._file.flush()
        return os.fstat(self._file.fileno()).st_size
