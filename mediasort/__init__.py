"""
mediasort - Sort photos and videos into year/month/day folders.

Classifies the media files of one directory, resolves each file's creation
date from embedded metadata (falling back to filesystem times), converts HEIC
images to JPG, and moves everything into {YYYY}/{YYYYMM}/{YYYYMMDD} folders.
"""

__version__ = "1.0.0"


# Public API
from .classifier import Action, MediaKind, action_for, classify
from .cli import main
from .config import Config
from .conversion import ImageConverter
from .core import MediaSorter
from .file_operations import ExecutionContext, FileOperations
from .timestamps import DateResolver, MetadataDateReader

__all__ = [ "main", "Config", "ImageConverter", "MediaSorter", "FileOperations",
            "ExecutionContext", "DateResolver", "MetadataDateReader", "MediaKind",
            "Action", "classify", "action_for" ]
