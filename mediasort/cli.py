"""
Command-line interface for mediasort.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import Config
from .constants import PROGRAM, check_tool_availability, get_console, get_logger
from .core import MediaSorter
from .errors import MetadataReadError
from .metadata import ExifToolSource


def setup_logging(console: Console, verbose: bool) -> None:
    """Send log records to the console, INFO and up (DEBUG with --verbose)."""
    level = logging.DEBUG if verbose else logging.INFO
    console_handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[console_handler]
    )
    get_logger().setLevel(level)


def create_parser(config: Config) -> argparse.ArgumentParser:
    """Create argument parser with dynamic defaults from config."""
    last_input = config.get_last_input()
    last_output = config.get_last_output()

    input_help = "Input directory containing photos and videos to sort"
    output_help = "Output directory for the YYYY/YYYYMM/YYYYMMDD tree"
    if last_input:
        input_help += f" (default: {last_input})"
    if last_output:
        output_help += f" (default: {last_output})"

    parser = argparse.ArgumentParser(
        prog=PROGRAM,
        description="Sorts photos and videos into daily directories by creation date",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {PROGRAM} ~/Pictures/Import ~/Pictures/Sorted
  {PROGRAM} --test -i ~/Pictures/Import -o ~/Pictures/Sorted
  {PROGRAM} --examine ~/Pictures/Import/IMG_0001.HEIC
        """
    )

    parser.add_argument("input", nargs="?", help=input_help)
    parser.add_argument("output", nargs="?", help=output_help)
    parser.add_argument(
        "--input", "-i", dest="input_override",
        help="Override input directory"
    )
    parser.add_argument(
        "--output", "-o", dest="output_override",
        help="Override output directory"
    )
    parser.add_argument(
        "--test", "-t", action="store_true",
        help="Simulation mode: log every action without changing any file"
    )
    parser.add_argument(
        "--examine", "-e", metavar="FILE",
        help="Print all metadata entries and the resolved date of a single file"
    )
    parser.add_argument(
        "--yes", "-y", action="store_true",
        help="Auto-confirm processing for saved input/output paths"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--version", "-V", action="store_true",
        help=f"Display the version number of {PROGRAM} and exit"
    )

    return parser


def show_processing_plan(source: Path, dest: Path, simulate: bool, console: Console) -> None:
    """Display the processing plan before execution."""
    console.print("\n[bold]Processing Plan:[/bold]")
    console.print(f"  Input:           [blue]{source}[/blue]")
    console.print(f"  Output:          [blue]{dest}[/blue]")
    console.print(f"  Processing Mode: [cyan]{'SIMULATE' if simulate else 'MOVE'}[/cyan]")
    console.print()


def confirm_processing(console: Console) -> bool:
    """Ask for confirmation when using saved configuration."""
    console.print("[yellow]Confirm processing plan with saved configuration.[/yellow]")

    try:
        response = console.input("Continue? [y/N]: ").strip().lower()
        return response in ['y', 'yes']
    except (EOFError, KeyboardInterrupt):
        console.print("\n[red]Operation cancelled[/red]")
        return False


def examine_file(file_arg: str, config: Config, console: Console) -> int:
    """Run the single-file diagnostic mode."""
    file_path = Path(file_arg).expanduser().resolve()
    if not file_path.is_file():
        console.print(f"[red]Error: File does not exist: {file_path}[/red]")
        return 1

    sorter = MediaSorter(source=file_path.parent, dest=file_path.parent, simulate=True,
                         metadata_source=ExifToolSource(),
                         convert_command=config.get_convert_command(),
                         convert_extension=config.get_convert_extension(),
                         show_progress=False, console=console)
    try:
        sorter.examine(file_path)
    except MetadataReadError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    return 0


def main(config_path: Optional[Path] = None, argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Args:
        config_path: Optional path to config file (for testing)
        argv: Optional argument list instead of sys.argv
    """
    config = Config(config_path=config_path)
    parser = create_parser(config)
    args = parser.parse_args(argv)

    if args.version:
        from . import __version__
        print(__version__)
        return 0

    console = get_console()
    setup_logging(console, args.verbose)

    if not check_tool_availability("exiftool"):
        console.print("[red]Error: exiftool is required but was not found on the PATH[/red]")
        return 1

    if args.examine:
        return examine_file(args.examine, config, console)

    # Detect if running with no directory arguments (using saved config)
    using_saved_config = args.input is None and args.output is None and \
                         args.input_override is None and args.output_override is None

    input_path = args.input_override or args.input or config.get_last_input()
    output_path = args.output_override or args.output or config.get_last_output()

    if not input_path or not output_path:
        parser.error("Input and output directories are required")

    source = Path(input_path).expanduser().resolve()
    dest = Path(output_path).expanduser().resolve()

    if not source.exists():
        console.print(f"[red]Error: Input directory does not exist: {source}[/red]")
        return 1

    if not source.is_dir():
        console.print(f"[red]Error: Input is not a directory: {source}[/red]")
        return 1

    if not args.test:
        config.update_paths(str(source), str(dest))

    show_processing_plan(source, dest, args.test, console)

    if using_saved_config and not args.yes:
        if not confirm_processing(console):
            return 0

    sorter = MediaSorter(
        source=source,
        dest=dest,
        simulate=args.test,
        metadata_source=ExifToolSource(),
        convert_command=config.get_convert_command(),
        convert_extension=config.get_convert_extension(),
        console=console
    )

    try:
        sorter.sort()
    except KeyboardInterrupt:
        console.print("\n[red]Operation cancelled by user[/red]")
        return 1

    sorter.print_summary()

    failed = sorter.stats_manager.get_failed()
    if failed > 0:
        console.print(f"\n[green]✓ Sorting completed[/green] [yellow]({failed} files failed, see log)[/yellow]")
    else:
        console.print("\n[green]✓ Sorting completed successfully![/green]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
