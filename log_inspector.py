"""CLI log inspector — list, read, and search rotated segments and archives."""

import argparse
import os
import sys

from compressed_rotating_log.inspector import list_log_files, read_file, search_files


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def main(argv=None):
    parser = argparse.ArgumentParser(description="Inspect rotated and archived log files")
    parser.add_argument("--log-file", default=os.environ.get("LOG_FILE", "./logs/application.log"),
                        help="Base path of the active log file")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--list", action="store_true", help="List segments and archives")
    group.add_argument("--read", metavar="FILENAME", help="Read a specific segment or archive")
    group.add_argument("--search", metavar="TEXT", help="Search text across all segments and archives")
    args = parser.parse_args(argv)

    log_dir = os.path.dirname(args.log_file) or "."

    if args.list:
        try:
            files = list_log_files(args.log_file)
        except FileNotFoundError:
            files = []
        if not files:
            print("No log files found.")
            return
        for name in files:
            size = os.path.getsize(os.path.join(log_dir, name))
            print(f"  {name}  ({_format_size(size)})")

    elif args.read:
        try:
            sys.stdout.write(read_file(log_dir, args.read))
        except FileNotFoundError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

    elif args.search:
        try:
            results = search_files(args.log_file, args.search)
        except FileNotFoundError:
            results = []
        if not results:
            print(f"No matches found for '{args.search}'.")
            return
        for filename, line_num, line in results:
            print(f"  [{filename}:{line_num}] {line}")


if __name__ == "__main__":
    main()
