"""
Exception hierarchy for media sorting.
"""


class MediaSortError(Exception):
    """Base exception for all media sorting errors."""


class MetadataReadError(MediaSortError):
    """Raised when a file's embedded metadata container cannot be decoded."""


class ConversionError(MediaSortError):
    """Raised when the external converter fails or produces no usable output."""


class FileOperationError(MediaSortError):
    """Raised when a filesystem mutation fails."""


class DirectoryCreationError(FileOperationError):
    pass


class MoveError(FileOperationError):
    pass
