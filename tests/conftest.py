"""
pytest configuration and fixtures for mediasort tests.
"""

import logging
import os
import sys
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import pytest

from mediasort.errors import MetadataReadError
from mediasort.metadata import MetadataContainer, MetadataDirectory, MetadataSource


@dataclass
class CliResult:
    """Result from running CLI command."""
    exit_code: int
    output: str
    error: str


class FakeMetadataSource(MetadataSource):
    """In-memory metadata keyed by file name.

    ``tags`` maps a file name to ``{(directory, tag): value}``. Files named in
    ``broken`` raise MetadataReadError on every read.
    """

    def __init__(self, tags: Optional[Dict[str, Dict[Tuple[str, str], str]]] = None,
                 broken: Optional[Set[str]] = None):
        self.tags = tags or {}
        self.broken = broken or set()
        self.calls = Counter()

    def read_container(self, file_path: Path) -> MetadataContainer:
        self.calls[file_path.name] += 1
        if file_path.name in self.broken:
            raise MetadataReadError(f"File format error: {file_path}")

        container = MetadataContainer()
        for (directory_name, tag_name), value in self.tags.get(file_path.name, {}).items():
            directory = container.get_directory(directory_name)
            if directory is None:
                directory = MetadataDirectory(name=directory_name)
                container.directories.append(directory)
            directory.tags[tag_name] = value
        return container


@pytest.fixture
def fake_metadata():
    """Factory for FakeMetadataSource instances."""
    return FakeMetadataSource


@pytest.fixture
def mediasort_logs(caplog):
    """Capture everything the program logger emits."""
    caplog.set_level(logging.DEBUG, logger="mediasort")
    return caplog


@pytest.fixture
def create_test_files(tmp_path):
    """Helper to create test files with specific properties."""

    def create_files(file_specs: List[dict], folder: str = "input") -> Path:
        """Create test files based on specifications.

        Args:
            file_specs: List of dicts with keys:
                - name: filename
                - content: file content (optional)
                - mtime: modification time as datetime (optional)
            folder: Directory name under tmp_path

        Returns:
            Path to directory containing created files
        """
        test_dir = tmp_path / folder
        test_dir.mkdir(exist_ok=True)

        for spec in file_specs:
            file_path = test_dir / spec['name']
            file_path.parent.mkdir(parents=True, exist_ok=True)

            content = spec.get('content', b'test file content')
            if isinstance(content, str):
                file_path.write_text(content)
            else:
                file_path.write_bytes(content)

            if 'mtime' in spec:
                mtime = spec['mtime'].timestamp()
                os.utime(file_path, (mtime, mtime))

        return test_dir

    return create_files


@pytest.fixture
def snapshot_tree():
    """Map every path below a root to its bytes (None for directories)."""

    def snapshot(root: Path) -> Dict[str, Optional[bytes]]:
        if not root.exists():
            return {}
        return {
            str(p.relative_to(root)): (p.read_bytes() if p.is_file() else None)
            for p in sorted(root.rglob("*"))
        }

    return snapshot


@pytest.fixture
def converter_script(tmp_path):
    """A stand-in for the image converter: writes <stem>.jpg next to its argument.

    Exits 3 without writing anything when the file name contains "fail", and
    writes an empty output when it contains "empty".
    """
    script = tmp_path / "tools dir" / "fake_convert.py"
    script.parent.mkdir(parents=True, exist_ok=True)
    script.write_text(
        "import sys\n"
        "from pathlib import Path\n"
        "source = Path(sys.argv[1])\n"
        "if 'fail' in source.name:\n"
        "    sys.stderr.write('convert: no decode delegate\\n')\n"
        "    sys.exit(3)\n"
        "target = source.with_suffix('.jpg')\n"
        "target.write_bytes(b'' if 'empty' in source.name else b'JPEG DATA')\n"
    )
    return f'"{sys.executable}" "{script}" "{{source}}"'


@pytest.fixture
def assert_file_structure():
    """Helper to assert expected file structure."""

    def check_structure(base_path: Path, expected_structure: dict):
        """Assert that directory has expected structure.

        Args:
            base_path: Root directory to check
            expected_structure: Dict describing expected structure
                e.g., {
                    "2023": {
                        "202305": {
                            "20230514": ["IMG_0001.JPG"]
                        }
                    }
                }
        """
        def check_level(path: Path, structure: dict):
            for name, value in structure.items():
                item_path = path / name
                assert item_path.exists(), f"Expected {item_path} to exist"
                assert item_path.is_dir(), f"Expected {item_path} to be a directory"

                if isinstance(value, dict):
                    check_level(item_path, value)
                elif isinstance(value, list):
                    actual_files = sorted([f.name for f in item_path.iterdir() if f.is_file()])
                    expected_files = sorted(value)
                    assert actual_files == expected_files, \
                        f"Expected files {expected_files} in {item_path}, got {actual_files}"

        check_level(base_path, expected_structure)

    return check_structure


@pytest.fixture
def cli_runner(monkeypatch, capsys, tmp_path):
    """Run the CLI against a fake metadata source and an isolated config file."""
    import mediasort.cli

    monkeypatch.setattr(mediasort.cli, "check_tool_availability", lambda cmd: True)

    def run_cli(*args, metadata: Optional[MetadataSource] = None,
                config_path: Optional[Path] = None) -> CliResult:
        source = metadata or FakeMetadataSource()
        monkeypatch.setattr(mediasort.cli, "ExifToolSource", lambda: source)

        try:
            exit_code = mediasort.cli.main(
                config_path=config_path or tmp_path / "config" / "config.yml",
                argv=[str(a) for a in args],
            )
        except SystemExit as e:
            exit_code = e.code if e.code is not None else 0

        captured = capsys.readouterr()
        return CliResult(exit_code=exit_code, output=captured.out, error=captured.err)

    return run_cli
