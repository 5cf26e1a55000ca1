"""
Core media sorting functionality.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from rich.console import Console
from rich.progress import Progress
from rich.table import Table

from .classifier import Action, MediaKind, action_for, classify
from .constants import DEFAULT_CONVERT_COMMAND, DEFAULT_CONVERT_EXTENSION, get_console, get_logger
from .conversion import ImageConverter
from .errors import MediaSortError
from .file_operations import ExecutionContext, FileOperations
from .metadata import ExifToolSource, MetadataSource
from .stats import StatsManager
from .timestamps import DateResolver, MetadataDateReader


class MediaSorter:
    """Sorts the photos and videos of one input directory into {YYYY}/{YYYYMM}/{YYYYMMDD}."""

    def __init__(self, source: Path, dest: Path, simulate: bool = False,
                 metadata_source: Optional[MetadataSource] = None,
                 convert_command: str = DEFAULT_CONVERT_COMMAND,
                 convert_extension: str = DEFAULT_CONVERT_EXTENSION,
                 convert_timeout: Optional[float] = None,
                 show_progress: bool = True, console: Optional[Console] = None):
        self.source = source
        self.dest = dest
        self.context = ExecutionContext(simulate=simulate)
        self.show_progress = show_progress
        self.console = console or get_console()
        self.logger = get_logger()
        self.stats_manager = StatsManager()

        self.file_ops = FileOperations(self.context)
        self.converter = ImageConverter(self.file_ops, command_template=convert_command,
                                        target_extension=convert_extension,
                                        timeout=convert_timeout)
        self.metadata_source = metadata_source or ExifToolSource()
        self.resolver = DateResolver(MetadataDateReader(self.metadata_source))

    @property
    def simulate(self) -> bool:
        return self.context.simulate

    def find_source_files(self) -> Tuple[List[Path], List[Path]]:
        """List the input directory (not recursive) into sidecar files and media files."""
        sidecar_files = []
        media_files = []

        for file_path in sorted(self.source.iterdir()):
            if not file_path.is_file():
                continue
            kind = classify(file_path)
            if kind is MediaKind.SIDECAR:
                sidecar_files.append(file_path)
            elif kind in (MediaKind.PHOTO, MediaKind.VIDEO):
                media_files.append(file_path)
            else:
                self.logger.debug(f"Ignoring {file_path}")

        return sidecar_files, media_files

    def get_destination_dir(self, creation_date: datetime) -> Path:
        """Directory {YYYY}/{YYYYMM}/{YYYYMMDD} under the output root."""
        return (self.dest
                / creation_date.strftime("%Y")
                / creation_date.strftime("%Y%m")
                / creation_date.strftime("%Y%m%d"))

    def sort(self) -> StatsManager:
        """Delete sidecar files, then file every photo and video by creation date."""
        if self.simulate:
            self.logger.info("*** Simulate mode is on, therefore no files will be changed")
        else:
            self.logger.info("*** Simulate mode is off, so files will be moved")
        self.logger.info(f"Sorting {self.source} -> {self.dest}")

        sidecar_files, media_files = self.find_source_files()
        self.delete_sidecar_files(sidecar_files)
        self.process_files(media_files)
        return self.stats_manager

    def delete_sidecar_files(self, sidecar_files: List[Path]) -> None:
        for file_path in sidecar_files:
            if self.file_ops.delete(file_path):
                self.stats_manager.increment_sidecars_deleted()

    def process_files(self, files: List[Path]) -> None:
        """Process media files one by one; a failing file never stops the run."""
        self.logger.info(f"Starting to process {len(files)} files")

        with Progress(console=self.console, disable=not self.show_progress) as progress:
            task = progress.add_task("Sorting media files...", total=len(files))
            for file_path in files:
                progress.update(task, description=f"Processing: {file_path.name}")
                try:
                    self._process_single_file(file_path)
                except (MediaSortError, OSError) as e:
                    self.logger.error(f"Error processing {file_path}: {e}")
                    self.stats_manager.increment_failed()
                progress.advance(task)

    def _process_single_file(self, file_path: Path) -> None:
        creation_date = self.resolver.resolve(file_path)
        if creation_date is None:
            self.logger.warning(f"Could not get creation date for {file_path}")
            self.stats_manager.increment_skipped()
            return

        dest_dir = self.get_destination_dir(creation_date)
        self.file_ops.ensure_directory(dest_dir)

        processing_file = file_path
        if action_for(file_path) is Action.CONVERT_THEN_MOVE:
            processing_file = self.converter.convert(file_path)
            self.stats_manager.increment_converted()

        self.file_ops.move(processing_file, dest_dir / processing_file.name)

        if classify(file_path) is MediaKind.VIDEO:
            self.stats_manager.increment_videos()
        else:
            self.stats_manager.increment_photos()

    def examine(self, file_path: Path) -> Optional[datetime]:
        """Print every metadata entry of a file followed by its resolved date.

        Nothing is changed on disk. Raises MetadataReadError for corrupt files.
        """
        container = self.metadata_source.read_container(file_path)

        table = Table(title=str(file_path))
        table.add_column("Directory", style="cyan")
        table.add_column("Tag", style="green")
        table.add_column("Description")
        for directory_name, tag_name, description in container.entries():
            table.add_row(directory_name, tag_name, description)
        self.console.print(table)

        creation_date = self.resolver.resolve(file_path)
        if creation_date is None:
            self.console.print("Resolved date: none")
        else:
            self.console.print(f"Resolved date: {creation_date.isoformat(sep=' ')}")
        return creation_date

    def print_summary(self) -> None:
        """Print processing summary."""
        title = "Simulation Summary" if self.simulate else "Processing Summary"
        table = Table(title=title)
        table.add_column("Category", style="cyan")
        table.add_column("Count", style="green")

        table.add_row("Photos", str(self.stats_manager.get_photos()))
        table.add_row("Videos", str(self.stats_manager.get_videos()))
        table.add_row("Images Converted", str(self.stats_manager.get_converted()))
        table.add_row("Sidecars Deleted", str(self.stats_manager.get_sidecars_deleted()))
        table.add_row("Skipped", str(self.stats_manager.get_skipped()))
        table.add_row("Failed", str(self.stats_manager.get_failed()))

        self.console.print(table)

        if self.stats_manager.has_errors():
            self.console.print(f"\n[red]{self.stats_manager.get_failed()} files could not be "
                               f"sorted and were left in {self.source}[/red]")
