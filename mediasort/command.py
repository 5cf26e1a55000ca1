"""
External command execution with captured output.
"""

import re
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from .constants import get_logger

# A run of non-space, non-quote characters, or a double-quoted span
_TOKEN_PATTERN = re.compile(r'[^\s"]+|"([^"]*)"')

logger = get_logger("mediasort.command")


@dataclass(frozen=True)
class CommandResult:
    """Outcome of an external process invocation."""
    success: bool
    standard_output: str
    error_output: str


def split_command_line(command_line: str) -> List[str]:
    """Split a command line on whitespace while keeping quoted spans together.

    Surrounding quotes are stripped from each token, so
    ``magick mogrify "/my photos/a.heic"`` yields three arguments.
    """
    return [match.group(0).strip('"') for match in _TOKEN_PATTERN.finditer(command_line)]


def run_command(args: List[str], timeout: Optional[float] = None) -> CommandResult:
    """Run a process to completion and capture both output streams."""
    logger.debug(f"Running: {args}")
    try:
        # communicate() drains stdout and stderr concurrently
        result = subprocess.run(args, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired:
        return CommandResult(False, "", f"Timed out after {timeout}s: {args[0]}")
    except OSError as e:
        return CommandResult(False, "", f"Could not run {args[0]}: {e}")

    return CommandResult(result.returncode == 0, result.stdout, result.stderr)


class CommandExecutor:
    """Executes a single command line given as one string."""

    def __init__(self, command_line: str, timeout: Optional[float] = None):
        self.command_line = command_line
        self.args = split_command_line(command_line)
        self.timeout = timeout

    def execute(self) -> CommandResult:
        if not self.args:
            return CommandResult(False, "", "Empty command line")
        return run_command(self.args, timeout=self.timeout)
