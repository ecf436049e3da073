"""Segment and archive file naming.

Rotated segments carry their index in front of the extension::

    logs/app.log   -> logs/app.1.log, logs/app.2.log, ...
    logs/app       -> logs/app.1, logs/app.2, ...

Archives append a timestamp and the compressor suffix to the segment name
(``logs/app.2.log.20250115_120000_000000.gz``), so the slot index can be
recovered with ``archive_pattern``.
"""

import os
import re


def split_by_extension(path: str) -> tuple[str, str]:
    """Split *path* into ``(stem, ext)`` using the last dot of the final component.

    A dot at the start of the file name (``.hidden``) or at the very end
    (``name.``) is not treated as an extension separator.
    """
    ext_index = path.rfind(".")
    if ext_index in (-1, 0) or ext_index == len(path) - 1:
        return path, ""

    folder_index = max(path.rfind("/"), path.rfind(os.sep))
    if folder_index != -1 and folder_index >= ext_index - 1:
        return path, ""

    return path[:ext_index], path[ext_index:]


def calc_filename(filename: str, index: int) -> str:
    """Return the path of segment *index* for base *filename*.

    >>> calc_filename("logs/mylog.txt", 3)
    'logs/mylog.3.txt'
    """
    if index == 0:
        return filename
    stem, ext = split_by_extension(filename)
    return f"{stem}.{index}{ext}"


# shape produced by compression.archive_timestamp
ARCHIVE_TIMESTAMP = r"\d{8}_\d{6}_\d{6}"


def archive_pattern(basename: str, ext: str, suffix: str) -> re.Pattern:
    """Compile a pattern matching archive file names and capturing the slot index."""
    return re.compile(
        rf"^{re.escape(basename)}\.(\d+){re.escape(ext)}\.{ARCHIVE_TIMESTAMP}{re.escape(suffix)}$"
    )


def shifted_archive_name(name: str, basename: str, index: int) -> str:
    """Rename the slot of archive *name* from *index* to ``index + 1``."""
    prefix = f"{basename}.{index}"
    return f"{basename}.{index + 1}{name[len(prefix):]}"
