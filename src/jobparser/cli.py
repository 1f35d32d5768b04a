"""Command-line interface for jobparser."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn

from .exceptions import FileProcessingError
from .processor import iter_task_files, process_file

logger = logging.getLogger(__name__)


def report_file(path: Path | str) -> bool:
    """Print the report for one file, or its error to stderr.

    Returns:
        True if the file was processed, False if it failed
    """
    try:
        output = process_file(path)
    except FileProcessingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return False
    print(output, end="")
    return True


def cmd_dir(directory: str) -> int:
    """Report every .job and .xml file in a directory."""
    try:
        paths = list(iter_task_files(directory))
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    failed = sum(not report_file(path) for path in paths)
    if failed:
        logger.warning("%d of %d files could not be processed", failed, len(paths))
    return 0


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="jobparser",
        description="Decode Windows Task Scheduler .job and Task XML files",
    )
    parser.add_argument("-f", "--file", help="Path to a .job or .xml file")
    parser.add_argument("-d", "--dir", help="Directory of .job/.xml files")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log decoding details to stderr"
    )
    return parser


def run(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    if args.file is None and args.dir is None:
        parser.print_help()
        return 0

    if args.file is not None:
        report_file(args.file)
    if args.dir is not None:
        return cmd_dir(args.dir)
    return 0


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    sys.exit(run(args, parser))


if __name__ == "__main__":
    main()
