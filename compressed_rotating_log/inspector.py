"""Inspector logic: list, read, and search the segments and archives of one log."""

import gzip
import os
import re

from compressed_rotating_log.naming import archive_pattern, split_by_extension


def _split_base(base_filename: str) -> tuple[str, str, str]:
    folder, name = os.path.split(base_filename)
    basename, ext = split_by_extension(name)
    return folder or ".", basename, ext


def list_log_files(base_filename: str, suffix: str = ".gz") -> list[str]:
    """Return file names for *base_filename*, newest first: active, rotated, then archives."""
    folder, basename, ext = _split_base(base_filename)
    active = os.path.basename(base_filename)
    segment_re = re.compile(rf"^{re.escape(basename)}\.(\d+){re.escape(ext)}$")
    archive_re = archive_pattern(basename, ext, suffix)

    keyed = []
    for name in os.listdir(folder):
        if name == active:
            keyed.append(((0, 0, name), name))
            continue
        m = segment_re.match(name)
        if m:
            keyed.append(((int(m.group(1)), 0, name), name))
            continue
        m = archive_re.match(name)
        if m:
            keyed.append(((int(m.group(1)), 1, name), name))
    keyed.sort()
    return [name for _, name in keyed]


def read_file(log_dir: str, filename: str) -> str:
    """Read a log file, transparently decompressing .gz files."""
    path = os.path.join(log_dir, filename)
    if not os.path.exists(path):
        raise FileNotFoundError(f"File not found: {path}")
    if filename.endswith(".gz"):
        with gzip.open(path, "rt") as f:
            return f.read()
    with open(path, "r") as f:
        return f.read()


def search_files(base_filename: str, text: str) -> list[tuple[str, int, str]]:
    """Search for text across all files of a log. Returns (filename, line_num, line) tuples."""
    folder, _, _ = _split_base(base_filename)
    results = []
    for filename in list_log_files(base_filename):
        path = os.path.join(folder, filename)
        try:
            if filename.endswith(".gz"):
                f = gzip.open(path, "rt")
            else:
                f = open(path, "r")
            with f:
                for line_num, line in enumerate(f, 1):
                    if text in line:
                        results.append((filename, line_num, line.rstrip("\n")))
        except (OSError, gzip.BadGzipFile):
            continue
    return results
