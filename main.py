"""Demo service: drives the compressed rotating handler and reports the retention ladder."""

import argparse
import itertools
import logging
import os
import signal
import sys
import threading

from compressed_rotating_log.config import load_config
from compressed_rotating_log.handler import CompressedRotatingFileHandler
from compressed_rotating_log.inspector import list_log_files

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [compressed-rotating-log] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def describe_ladder(base_filename: str) -> list[str]:
    """One line per file of the log, newest first, tagged active/plaintext/archive."""
    folder = os.path.dirname(base_filename) or "."
    lines = []
    try:
        names = list_log_files(base_filename)
    except FileNotFoundError:
        return lines
    for name in names:
        if name == os.path.basename(base_filename):
            kind = "active"
        elif name.endswith(".gz"):
            kind = "archive"
        else:
            kind = "plaintext"
        size = os.path.getsize(os.path.join(folder, name))
        lines.append(f"{kind:<9} {size:>10} B  {name}")
    return lines


def run(config, records: int | None, interval: float, stop: threading.Event) -> int:
    """Log numbered records through the handler until *records* is reached or *stop* is set."""
    handler = CompressedRotatingFileHandler.from_config(config)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
    app_logger = logging.getLogger("demo.app")
    app_logger.propagate = False
    app_logger.setLevel(logging.INFO)
    app_logger.addHandler(handler)

    written = 0
    try:
        for seq in itertools.count():
            if stop.is_set() or (records is not None and written >= records):
                break
            app_logger.info("record seq=%08d payload=%s", seq, "x" * (seq % 64))
            written += 1
            if interval:
                stop.wait(interval)
    finally:
        app_logger.removeHandler(handler)
        handler.close()
    return written


def main(argv=None):
    parser = argparse.ArgumentParser(description="Write demo records through a compressed rotating log")
    parser.add_argument("--records", type=int, default=None, help="Stop after this many records")
    parser.add_argument("--interval", type=float, default=0.05, help="Seconds between records")
    args = parser.parse_args(argv)

    config = load_config()
    logger.info(
        "Config: file=%s, max_size=%d bytes, max_files=%d, max_compressed_files=%d, rotate_on_open=%s",
        config.base_filename, config.max_size_bytes, config.max_files,
        config.max_compressed_files, config.rotate_on_open,
    )

    stop = threading.Event()
    signal.signal(signal.SIGINT, lambda sig, _frame: stop.set())
    signal.signal(signal.SIGTERM, lambda sig, _frame: stop.set())

    written = run(config, args.records, args.interval, stop)
    logger.info("Stopped after %d record(s); retention ladder:", written)
    for line in describe_ladder(config.base_filename):
        print(line)


if __name__ == "__main__":
    main()
