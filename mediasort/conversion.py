"""
Image format conversion through an external command-line tool.
"""

from pathlib import Path
from typing import Callable, Optional

from .command import CommandExecutor, CommandResult
from .constants import DEFAULT_CONVERT_COMMAND, DEFAULT_CONVERT_EXTENSION, get_logger
from .errors import ConversionError
from .file_operations import FileOperations


def _execute(command_line: str, timeout: Optional[float]) -> CommandResult:
    return CommandExecutor(command_line, timeout=timeout).execute()


class ImageConverter:
    """Converts a file in place (e.g. HEIC to JPG) and removes the original."""

    def __init__(self, file_ops: FileOperations,
                 command_template: str = DEFAULT_CONVERT_COMMAND,
                 target_extension: str = DEFAULT_CONVERT_EXTENSION,
                 timeout: Optional[float] = None,
                 execute: Callable[[str, Optional[float]], CommandResult] = _execute):
        self.file_ops = file_ops
        self.command_template = command_template
        self.target_extension = target_extension.lstrip(".")
        self.timeout = timeout
        self._execute = execute
        self.logger = get_logger("mediasort.conversion")

    def get_output_path(self, source: Path) -> Path:
        """Path the tool writes: same directory and base name, new extension."""
        return source.with_name(f"{source.stem}.{self.target_extension}")

    def build_command(self, source: Path) -> str:
        return self.command_template.format(source=source.absolute())

    def convert(self, source: Path) -> Path:
        """Convert source and return the converted file's path.

        Under simulate mode nothing runs and the path the real run would
        produce is returned. The original is only deleted once the output
        exists and is non-empty. An existing file at the output path is never
        overwritten; the conversion fails instead, in both modes.
        """
        destination = self.get_output_path(source)

        if destination.exists():
            self.logger.error(f"Could not convert {source}: {destination} already exists")
            raise ConversionError(
                f"Could not convert {source}: output already exists at {destination}")

        if self.file_ops.simulate:
            self.logger.info(f"Would convert {source} -> {destination}")
            return destination

        result = self._execute(self.build_command(source), self.timeout)
        if not result.success:
            self.logger.error(f"Could not convert {source}")
            raise ConversionError(
                f"Could not convert {source}: {result.error_output.strip()}")

        if not destination.exists() or destination.stat().st_size == 0:
            self.logger.error(f"Could not convert {source}")
            raise ConversionError(f"Could not convert {source}: no output at {destination}")

        self.logger.info(f"Converted {source} -> {destination}")
        self.file_ops.delete(source)
        return destination
