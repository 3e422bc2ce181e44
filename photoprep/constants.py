"""
File extension constants, shared logger/console and tool probing.
"""

import logging
import shutil
import subprocess
from typing import Optional

from rich.console import Console

PROGRAM = "photoprep"

# File extension constants
JPG_EXTENSIONS = (".jpg", ".jpeg")
CONVERTIBLE_EXTENSIONS = (".png", ".heic")
RENAMABLE_STILL_EXTENSIONS = (".heic", ".png") + JPG_EXTENSIONS
VIDEO_EXTENSIONS = (".mp4", ".mov")
LIVEPHOTO_STILL_EXTENSIONS = (".heic", ".png") + JPG_EXTENSIONS
LIVEPHOTO_VIDEO_EXTENSION = ".mov"

# Naming
DEFAULT_TARGET_EXTENSION = "jpg"
DEFAULT_LIVEPHOTO_FOLDER = "Live Photos"
COLLISION_MARKER = " - New"
DATE_PREFIX_FORMAT = "%Y-%m-%d_%H-%M_"
RUN_LOG_TIMESTAMP = "%Y-%m-%d_%H-%M-%S"

# Seconds before an external tool call is abandoned
TOOL_TIMEOUT = 300

_console: Optional[Console] = None


def get_logger(name: str = PROGRAM) -> logging.Logger:
    """Get the program logger, or a named child of it."""
    return logging.getLogger(name)


def get_console() -> Console:
    """Get the shared rich console."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def check_tool_availability(cmd: str, version_flag: str = "-h") -> bool:
    """Check whether an external command-line tool can be run."""
    if shutil.which(cmd) is None:
        return False
    try:
        subprocess.run([cmd, version_flag], capture_output=True, timeout=10)
        return True
    except (OSError, subprocess.SubprocessError):
        return False
