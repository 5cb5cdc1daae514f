import logging
import os
from dataclasses import dataclass

from . import constants
from . import utils
from .boxes import get_duration

log = logging.getLogger("Scanner")


@dataclass(frozen=True)
class ScanOptions:
    verbose: bool = False
    follow_symlinks: bool = False
    color: bool = False
    path_width: int = constants.DEFAULT_PATH_WIDTH


@dataclass(frozen=True)
class FolderResult:
    """
    Totals for a folder and everything below it.

    folders_with_media counts folders holding at least one MP4 with a
    readable duration directly inside them; a folder whose MP4s all sit in
    subfolders is not counted itself.
    """
    files_found: int = 0
    folders_with_media: int = 0
    duration_seconds: float = 0.0

    def merge(self, other):
        return FolderResult(
            files_found=self.files_found + other.files_found,
            folders_with_media=self.folders_with_media + other.folders_with_media,
            duration_seconds=self.duration_seconds + other.duration_seconds,
        )

    __add__ = merge


EMPTY = FolderResult()


def summarize_folder(local_durations, children=()):
    """
    Combines the durations found directly in a folder with its subfolders' results.
    """
    local = FolderResult(
        files_found=len(local_durations),
        folders_with_media=1 if local_durations else 0,
        duration_seconds=sum(local_durations, 0.0),
    )
    result = local
    for child in children:
        result = result.merge(child)
    return result


def format_folder_line(path, duration_seconds, options):
    time_str = utils.format_duration(duration_seconds)
    shown = utils.truncate_path(path, options.path_width)
    return f"\U0001F7E1 {time_str} {utils.colorize(shown, constants.COLOR_GREEN, options.color)}"


def _list_entries(path):
    try:
        with os.scandir(path) as it:
            return sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        log.debug(f"Skipping {path}: {e}")
        return None


def _classify(entry, follow_symlinks):
    """Returns 'dir', 'file' or None for anything else."""
    try:
        if not follow_symlinks and entry.is_symlink():
            return None
        if entry.is_dir(follow_symlinks=follow_symlinks):
            return "dir"
        if entry.is_file(follow_symlinks=follow_symlinks):
            return "file"
    except OSError as e:
        log.debug(f"Could not stat {entry.path}: {e}")
    return None


def _dir_key(path):
    try:
        st = os.stat(path)
    except OSError:
        return None
    return st.st_dev, st.st_ino


class _Frame:
    """A folder being walked: its remaining entries and what was found so far."""
    __slots__ = ("path", "entries", "local_durations", "children")

    def __init__(self, path, entries):
        self.path = path
        self.entries = iter(entries)
        self.local_durations = []
        self.children = []


def _enter(path, visited):
    if visited is not None:
        key = _dir_key(path)
        if key is not None:
            if key in visited:
                log.debug(f"Already visited {path}, not following it again")
                return None
            visited.add(key)

    entries = _list_entries(path)
    if entries is None:
        return None
    return _Frame(path, entries)


def _finish(frame, options):
    if frame.local_durations:
        local_duration = sum(frame.local_durations, 0.0)
        log.debug(f"{frame.path}: {len(frame.local_durations)} files, {local_duration:.3f}s")
        if options.verbose:
            print(format_folder_line(frame.path, local_duration, options))
    return summarize_folder(frame.local_durations, frame.children)


def scan(path, options=None):
    """
    Walks `path` depth-first and returns the totals for the whole tree.

    Folders that can't be listed and files without a readable duration are
    skipped. With options.verbose, prints one line per folder that holds
    MP4s directly, after its subfolders' lines. The walk keeps its own
    stack, so tree depth is only limited by the filesystem.
    """
    options = options or ScanOptions()
    visited = set() if options.follow_symlinks else None

    root = _enter(path, visited)
    if root is None:
        return EMPTY

    stack = [root]
    result = EMPTY
    while stack:
        frame = stack[-1]
        entry = next(frame.entries, None)

        if entry is None:
            stack.pop()
            result = _finish(frame, options)
            if stack:
                stack[-1].children.append(result)
            continue

        kind = _classify(entry, options.follow_symlinks)
        if kind == "dir":
            child = _enter(entry.path, visited)
            if child is not None:
                stack.append(child)
        elif kind == "file" and utils.is_mp4_name(entry.name):
            d = get_duration(entry.path)
            if d.found:
                frame.local_durations.append(d.seconds)
            else:
                log.debug(f"No duration found in {entry.path}")

    return result
