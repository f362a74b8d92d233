"""Project configuration settings.

Fixed constants for the target store, the copy tool and the shell menu.
Only the store location may be overridden (via TARGETCOPY_STORE).
"""

from pathlib import Path
import os

# Target store
DEFAULT_STORE_PATH = Path.home() / ".targetcopy" / "targets.txt"
STORE_HEADER = "Nickname|Path"
FIELD_SEPARATOR = "|"
STORE_ENCODING = "utf-8"

# Names skipped everywhere in the copied tree (files and directories)
EXCLUDE_NAMES = frozenset({
    "$RECYCLE.BIN",
    "System Volume Information",
    "Thumbs.db",
    "desktop.ini",
    ".DS_Store",
    "__pycache__",
    "node_modules",
})

# Copy tool
COPY_TOOL = "robocopy"
RETRY_COUNT = 3
RETRY_WAIT_SECONDS = 5
COPY_THREADS = 8
LOG_ENABLED = True
LOG_FILE_NAME = "robocopy.log"
FAILURE_EXIT_CODE = 8  # robocopy: >= 8 means at least one copy failed

# Console
PAUSE_AT_END = True

# Shell menu
MENU_GROUP = "TargetCopy"
MENU_LABEL = "Copy to target"
SHELL_PLACEHOLDER = "%1"

# Logging
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def store_path() -> Path:
    """Location of the target list, honouring TARGETCOPY_STORE at call time."""
    env_path = os.environ.get("TARGETCOPY_STORE")
    return Path(env_path) if env_path else DEFAULT_STORE_PATH


__all__ = [
    'DEFAULT_STORE_PATH', 'STORE_HEADER', 'FIELD_SEPARATOR', 'STORE_ENCODING',
    'EXCLUDE_NAMES', 'COPY_TOOL', 'RETRY_COUNT', 'RETRY_WAIT_SECONDS', 'COPY_THREADS',
    'LOG_ENABLED', 'LOG_FILE_NAME', 'FAILURE_EXIT_CODE', 'PAUSE_AT_END',
    'MENU_GROUP', 'MENU_LABEL', 'SHELL_PLACEHOLDER', 'LOG_LEVEL', 'LOG_FORMAT',
    'store_path'
]
