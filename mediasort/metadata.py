"""
Embedded metadata access through exiftool.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .command import run_command
from .constants import get_logger
from .errors import MetadataReadError


logger = get_logger("mediasort.metadata")


@dataclass
class MetadataDirectory:
    """One metadata section (e.g. IFD0, ExifIFD, Keys) and its tags."""
    name: str
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class MetadataContainer:
    """All metadata directories decoded from a single file."""
    directories: List[MetadataDirectory] = field(default_factory=list)

    def get_directory(self, name: str) -> Optional[MetadataDirectory]:
        """Return the first directory with the given name."""
        for directory in self.directories:
            if directory.name == name:
                return directory
        return None

    def get_tag(self, directory_name: str, tag_name: str) -> Optional[str]:
        directory = self.get_directory(directory_name)
        if directory is None:
            return None
        return directory.tags.get(tag_name)

    def entries(self) -> Iterator[Tuple[str, str, str]]:
        """Yield (directory name, tag name, tag description) for every tag."""
        for directory in self.directories:
            for tag_name, description in directory.tags.items():
                yield directory.name, tag_name, description


class MetadataSource:
    """Capability that decodes a file's embedded metadata."""

    def read_container(self, file_path: Path) -> MetadataContainer:
        """Decode all metadata of a file, raising MetadataReadError if malformed."""
        raise NotImplementedError


class ExifToolSource(MetadataSource):
    """Reads metadata by calling exiftool with JSON output and group names."""

    def __init__(self, executable: str = "exiftool"):
        self.executable = executable

    def read_container(self, file_path: Path) -> MetadataContainer:
        result = run_command([self.executable, "-json", "-G1", "-a", str(file_path)])

        if not result.success and not result.standard_output.strip():
            raise MetadataReadError(
                f"exiftool failed for {file_path}: {result.error_output.strip()}")

        try:
            records = json.loads(result.standard_output)
        except json.JSONDecodeError as e:
            raise MetadataReadError(f"Unreadable exiftool output for {file_path}: {e}")

        if not records:
            raise MetadataReadError(f"No metadata record returned for {file_path}")

        container = self.parse_record(records[0], file_path)
        logger.debug(f"Read {len(container.directories)} metadata directories from {file_path}")
        return container

    @staticmethod
    def parse_record(record: Dict, file_path: Path) -> MetadataContainer:
        """Group a flat ``{"Group:Tag": value}`` record into directories."""
        container = MetadataContainer()
        by_name: Dict[str, MetadataDirectory] = {}

        for key, value in record.items():
            if key == "SourceFile":
                continue

            group, _, tag_name = key.rpartition(":")
            group = group or "Unknown"

            if tag_name == "Error":
                raise MetadataReadError(f"Error in processing file {file_path}: {value}")

            if group not in by_name:
                by_name[group] = MetadataDirectory(name=group)
                container.directories.append(by_name[group])
            by_name[group].tags[tag_name] = str(value)

        return container
