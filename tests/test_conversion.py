"""
Test image conversion through the external converter.
"""

from pathlib import Path

import pytest

from mediasort.command import CommandResult
from mediasort.conversion import ImageConverter
from mediasort.errors import ConversionError
from mediasort.file_operations import ExecutionContext, FileOperations


def make_converter(simulate=False, **kwargs) -> ImageConverter:
    return ImageConverter(FileOperations(ExecutionContext(simulate=simulate)), **kwargs)


class TestImageConverter:
    """Test the convert-then-delete-original contract."""

    def test_default_command_quotes_absolute_path(self, tmp_path):
        source = tmp_path / "My Photos" / "photo.HEIC"
        command = make_converter().build_command(source)
        assert command == f'magick mogrify -format jpg "{source.absolute()}"'

    def test_output_path_keeps_base_name(self):
        assert make_converter().get_output_path(Path("/in/photo.HEIC")) == Path("/in/photo.jpg")

    def test_success_replaces_original(self, create_test_files):
        folder = create_test_files([{"name": "photo.HEIC"}])
        calls = []

        def execute(command_line, timeout):
            calls.append(command_line)
            (folder / "photo.jpg").write_bytes(b"JPEG DATA")
            return CommandResult(True, "", "")

        result = make_converter(execute=execute).convert(folder / "photo.HEIC")

        assert result == folder / "photo.jpg"
        assert not (folder / "photo.HEIC").exists()
        assert len(calls) == 1

    def test_non_zero_exit_keeps_original(self, create_test_files):
        folder = create_test_files([{"name": "photo.HEIC"}])
        converter = make_converter(
            execute=lambda command_line, timeout: CommandResult(False, "", "no decode delegate"))

        with pytest.raises(ConversionError, match="no decode delegate"):
            converter.convert(folder / "photo.HEIC")
        assert (folder / "photo.HEIC").exists()

    def test_missing_output_keeps_original(self, create_test_files):
        folder = create_test_files([{"name": "photo.HEIC"}])
        converter = make_converter(execute=lambda command_line, timeout: CommandResult(True, "", ""))

        with pytest.raises(ConversionError, match="no output"):
            converter.convert(folder / "photo.HEIC")
        assert (folder / "photo.HEIC").exists()

    def test_empty_output_keeps_original(self, create_test_files):
        folder = create_test_files([{"name": "photo.HEIC"}])

        def execute(command_line, timeout):
            (folder / "photo.jpg").write_bytes(b"")
            return CommandResult(True, "", "")

        with pytest.raises(ConversionError):
            make_converter(execute=execute).convert(folder / "photo.HEIC")
        assert (folder / "photo.HEIC").exists()

    def test_simulate_runs_nothing(self, create_test_files, mediasort_logs):
        folder = create_test_files([{"name": "photo.HEIC"}])

        def execute(command_line, timeout):
            raise AssertionError("converter must not run in simulate mode")

        result = make_converter(simulate=True, execute=execute).convert(folder / "photo.HEIC")

        assert result == folder / "photo.jpg"
        assert (folder / "photo.HEIC").exists()
        assert not (folder / "photo.jpg").exists()
        assert "Would convert" in mediasort_logs.text

    def test_external_process(self, create_test_files, converter_script):
        folder = create_test_files([{"name": "IMG 0001.HEIC"}])

        result = make_converter(command_template=converter_script).convert(folder / "IMG 0001.HEIC")

        assert result == folder / "IMG 0001.jpg"
        assert result.read_bytes() == b"JPEG DATA"
        assert not (folder / "IMG 0001.HEIC").exists()

    def test_external_process_failure(self, create_test_files, converter_script):
        folder = create_test_files([{"name": "fail.HEIC"}])

        with pytest.raises(ConversionError, match="no decode delegate"):
            make_converter(command_template=converter_script).convert(folder / "fail.HEIC")
        assert (folder / "fail.HEIC").exists()

    def test_existing_output_is_never_overwritten(self, create_test_files):
        folder = create_test_files([{"name": "img.HEIC", "content": b"HEIC PIXELS"},
                                    {"name": "img.jpg", "content": b"ORIGINAL JPG"}])
        calls = []

        def execute(command_line, timeout):
            calls.append(command_line)
            return CommandResult(True, "", "")

        with pytest.raises(ConversionError, match="already exists"):
            make_converter(execute=execute).convert(folder / "img.HEIC")

        assert calls == []
        assert (folder / "img.HEIC").read_bytes() == b"HEIC PIXELS"
        assert (folder / "img.jpg").read_bytes() == b"ORIGINAL JPG"

    def test_existing_output_fails_in_simulate_mode(self, create_test_files):
        folder = create_test_files([{"name": "img.HEIC"}, {"name": "img.jpg"}])

        with pytest.raises(ConversionError, match="already exists"):
            make_converter(simulate=True).convert(folder / "img.HEIC")
        assert (folder / "img.HEIC").exists()
