"""
File classification by extension.
"""

from enum import Enum
from pathlib import Path

from .constants import (CONVERT_EXTENSIONS, PHOTO_EXTENSIONS, SIDECAR_EXTENSIONS,
                        VIDEO_EXTENSIONS)


class MediaKind(Enum):
    PHOTO = "photo"
    VIDEO = "video"
    SIDECAR = "sidecar"
    UNKNOWN = "unknown"


class Action(Enum):
    MOVE = "move"
    CONVERT_THEN_MOVE = "convert_then_move"


def get_extension(file_path: Path) -> str:
    """Return the upper-cased text after the last dot of the name.

    Unlike ``Path.suffix`` a bare dot name such as ``.jpg`` has extension JPG.
    """
    name = file_path.name
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].upper()


def classify(file_path: Path) -> MediaKind:
    """Map a file's extension to its media kind."""
    ext = get_extension(file_path)
    if ext in PHOTO_EXTENSIONS:
        return MediaKind.PHOTO
    if ext in VIDEO_EXTENSIONS:
        return MediaKind.VIDEO
    if ext in SIDECAR_EXTENSIONS:
        return MediaKind.SIDECAR
    return MediaKind.UNKNOWN


def action_for(file_path: Path) -> Action:
    """Determine what has to happen to a photo or video before it is filed."""
    if get_extension(file_path) in CONVERT_EXTENSIONS:
        return Action.CONVERT_THEN_MOVE
    return Action.MOVE
