import math
import os

from . import constants

ELLIPSIS = "..."


def is_mp4_name(name):
    """
    True if the last '.'-delimited segment of a file name is 'mp4', ignoring case.
    """
    _, dot, ext = name.rpartition(".")
    return bool(dot) and ext.lower() == constants.MP4_EXTENSION


def format_hms(total_seconds):
    """
    Splits a duration in seconds into (hours, minutes, seconds).

    Seconds are taken from the truncated total, int(total_seconds) % 60,
    not from what is left after removing hours and minutes.
    """
    if math.isnan(total_seconds) or math.isinf(total_seconds):
        raise ValueError(f"duration must be finite, got {total_seconds!r}")
    if total_seconds < 0:
        raise ValueError(f"duration must not be negative, got {total_seconds!r}")

    hours = int(total_seconds / 3600)
    minutes = int((total_seconds - hours * 3600) / 60)
    seconds = int(total_seconds) % 60
    return hours, minutes, seconds


def format_duration(total_seconds):
    """Formats a duration in seconds as H:MM:SS."""
    hours, minutes, seconds = format_hms(total_seconds)
    return f"{hours}:{minutes:02}:{seconds:02}"


def truncate_path(path, max_len=constants.DEFAULT_PATH_WIDTH):
    """
    Shortens a path for display by keeping its head and tail around '...'.
    Widths too narrow for the ellipsis get a plain cut.
    """
    path = os.fspath(path)
    if len(path) <= max_len:
        return path
    if max_len < len(ELLIPSIS):
        return path[:max(max_len, 0)]

    head = tail = max(max_len // 2 - 2, 0)
    return f"{path[:head]}{ELLIPSIS}{path[len(path) - tail:]}"


def colorize(text, color, enabled=True):
    if not enabled:
        return text
    return f"{color}{text}{constants.COLOR_RESET}"
