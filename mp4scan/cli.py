import argparse
import logging
import os
import sys

from . import config
from . import constants
from .scanner import ScanOptions, scan
from .utils import colorize, format_duration

# Configure basic logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
log = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="mp4scan",
        description="Adds up the playback time of the MP4 files in a folder tree."
    )
    parser.add_argument("paths", nargs="*", metavar="path",
                        help="Folder to scan. The last one given wins; defaults to the current directory.")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print the duration of every folder that holds MP4 files.")
    parser.add_argument("--follow-symlinks", action="store_true", default=config.FOLLOW_SYMLINKS,
                        help="Follow symbolic links to files and folders.")
    parser.add_argument("--no-color", dest="color", action="store_false", default=config.USE_COLOR,
                        help="Disable ANSI colours.")
    parser.add_argument("--log-level", default=None, choices=config.LOG_LEVELS,
                        help="Diagnostic logging level (stderr).")
    return parser


def resolve_target(paths):
    """
    Picks the folder to scan: the last path given, else the current directory.
    Returns None if the current directory can't be resolved.
    """
    if paths:
        return paths[-1]
    try:
        return os.getcwd()
    except OSError as e:
        log.error(f"Could not resolve the current directory: {e}")
        return None


def print_report(result, color=True):
    files = colorize(result.files_found, constants.COLOR_YELLOW, color)
    folders = colorize(result.folders_with_media, constants.COLOR_YELLOW, color)
    total = colorize(format_duration(result.duration_seconds), constants.COLOR_YELLOW, color)

    print("\n\U0001F4CA Result:")
    print(f"\U0001F44C Found {files} MP4 files in {folders} folders.")
    print(f"\U0001F3C1 Total duration: {total}")


def main(argv=None):
    args = build_parser().parse_intermixed_args(argv)
    if args.log_level:
        logging.getLogger().setLevel(args.log_level)

    target = resolve_target(args.paths)
    if target is None:
        print("Could not determine the folder to scan.", file=sys.stderr)
        return 1

    options = ScanOptions(
        verbose=args.verbose,
        follow_symlinks=args.follow_symlinks,
        color=args.color,
        path_width=config.PATH_DISPLAY_WIDTH,
    )

    print(f"\U0001F552 Scanning folder: {target}")
    try:
        result = scan(target, options)
    except KeyboardInterrupt:
        log.info("Scan stopped by user.")
        print("\nScan interrupted.", file=sys.stderr)
        return 130
    log.info(f"Scanned {target}: {result}")
    print_report(result, color=args.color)
    return 0


if __name__ == "__main__":
    sys.exit(main())
