import os


# Helper function to get integer values from environment variables, with a default.
def _get_int_env(key, default):
    value = os.environ.get(key)
    if value and value.isdigit():
        return int(value)
    return default


def _get_bool_env(key, default=False):
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# Unknown level names fall back to the default instead of failing at startup.
def _get_log_level_env(key, default="WARNING"):
    value = os.environ.get(key, default).strip().upper()
    if value in LOG_LEVELS:
        return value
    return default


# -- Logging Configuration --
# Level for diagnostic logging written to stderr. The scan report itself
# always goes to stdout.
# Can be overridden by environment variable: MP4SCAN_LOG_LEVEL
LOG_LEVEL = _get_log_level_env("MP4SCAN_LOG_LEVEL")


# -- Scanner Configuration --
# Whether symbolic links to files and directories are followed.
# Directories reached twice through links are only scanned once.
# Can be overridden by environment variable: MP4SCAN_FOLLOW_SYMLINKS
FOLLOW_SYMLINKS = _get_bool_env("MP4SCAN_FOLLOW_SYMLINKS")


# -- Output Configuration --
# Maximum width of a folder path in verbose output. Longer paths are
# shortened in the middle.
# Can be overridden by environment variable: MP4SCAN_PATH_WIDTH
PATH_DISPLAY_WIDTH = _get_int_env("MP4SCAN_PATH_WIDTH", 90)

# ANSI colours in the report. Disabled when NO_COLOR is set to anything.
USE_COLOR = "NO_COLOR" not in os.environ
