"""
Filesystem mutations with simulate (dry-run) support.
"""

import shutil
from dataclasses import dataclass
from pathlib import Path

from .constants import get_logger
from .errors import DirectoryCreationError, MoveError


@dataclass(frozen=True)
class ExecutionContext:
    """Run-wide settings handed to every mutating operation."""
    simulate: bool = False


class FileOperations:
    """Directory creation, move and delete, each suppressed under simulate mode."""

    def __init__(self, context: ExecutionContext):
        self.context = context
        self.logger = get_logger()

    @property
    def simulate(self) -> bool:
        return self.context.simulate

    def ensure_directory(self, directory: Path) -> None:
        """Create directory and parents if missing."""
        if directory.is_dir():
            return

        if self.simulate:
            self.logger.info(f"Would create directory {directory}")
            return

        self.logger.info(f"Create directory {directory}")
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreationError(f"Could not create directory {directory}: {e}") from e

    def move(self, source: Path, destination: Path) -> None:
        """Move a file, refusing to replace an existing destination.

        The collision check runs under simulate mode too, so a dry run fails
        the same files a real run would.
        """
        if destination.exists():
            if self.simulate:
                self.logger.warning(f"Would fail: destination exists {destination}")
            raise MoveError(f"Destination already exists: {destination}")

        if self.simulate:
            self.logger.info(f"Would move {source} -> {destination}")
            return

        try:
            shutil.move(str(source), str(destination))
        except OSError as e:
            raise MoveError(f"Failed to move {source} -> {destination}: {e}") from e

        self.logger.info(f"{source} -> {destination}")

    def delete(self, source: Path) -> bool:
        """Remove a file. Failures are logged and reported through the return value."""
        if self.simulate:
            self.logger.info(f"Would delete {source}")
            return True

        try:
            source.unlink()
        except OSError as e:
            self.logger.error(f"Could not delete {source}: {e}")
            return False

        self.logger.info(f"Deleted {source}")
        return True
