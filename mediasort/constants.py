"""
File extension constants and shared helpers for media sorting.
"""

import logging
import shutil
from datetime import timedelta
from typing import Optional

from rich.console import Console

PROGRAM = "mediasort"

# File extension constants (compared upper-cased, without the dot)
PHOTO_EXTENSIONS = ("JPG", "JPEG", "HEIC", "PNG")
VIDEO_EXTENSIONS = ("MP4", "MOV")
SIDECAR_EXTENSIONS = ("AAE",)
CONVERT_EXTENSIONS = ("HEIC",)

# Metadata (directory, tag) pairs as reported by exiftool -G1
PHOTO_PRIMARY_DATE_TAG = ("IFD0", "ModifyDate")
PHOTO_ORIGINAL_DATE_TAG = ("ExifIFD", "DateTimeOriginal")
VIDEO_CREATION_DATE_TAG = ("Keys", "CreationDate")

# Fixed timezone compensation applied to video metadata and filesystem dates
VIDEO_DATE_OFFSET = timedelta(hours=1)
FILE_DATE_OFFSET = timedelta(hours=1)

# Default external image conversion
DEFAULT_CONVERT_COMMAND = 'magick mogrify -format jpg "{source}"'
DEFAULT_CONVERT_EXTENSION = "jpg"

_console: Optional[Console] = None


def get_console() -> Console:
    """Return the shared rich console."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def get_logger(name: str = PROGRAM) -> logging.Logger:
    """Return the program logger or one of its children."""
    return logging.getLogger(name)


def check_tool_availability(cmd: str) -> bool:
    """Check whether an external executable can be found on the PATH."""
    return shutil.which(cmd) is not None
