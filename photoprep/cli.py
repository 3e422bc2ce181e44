"""
Command-line interface for photoprep.
"""

import argparse
import re
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from .config import Config, RunConfig
from .constants import PROGRAM, get_console
from .core import PhotoPrep
from .errors import PhotoPrepError


def parse_extension(ext_str: str) -> str:
    """Normalize a target extension such as '.JPG' to 'jpg'."""
    if not re.match(r'^\.?[A-Za-z0-9]{2,5}$', ext_str):
        raise argparse.ArgumentTypeError(f"Invalid extension: {ext_str}")
    return ext_str.lstrip('.').lower()


def create_parser(config: Config) -> argparse.ArgumentParser:
    """Create argument parser with dynamic defaults from config."""
    last_directory = config.get_last_directory()
    extension = config.get_target_extension()

    directory_help = "Directory of phone media to process"
    if last_directory:
        directory_help += f" (default: {last_directory})"

    parser = argparse.ArgumentParser(
        description="Date-prefix, convert and tidy a folder of phone photos and videos",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {PROGRAM} ~/Pictures/PhoneBackup --prefix --live-photos
  {PROGRAM} ~/Pictures/PhoneBackup --extension png --replace-originals
  {PROGRAM} --dry-run --verbose
        """
    )

    parser.add_argument(
        "directory", nargs="?",
        help=directory_help
    )
    parser.add_argument(
        "--extension", "-e", type=str, metavar="EXT",
        help=f"Target image extension for conversion (default: {extension})"
    )
    parser.add_argument(
        "--replace-originals", "-r", action="store_true",
        help="Delete .png/.heic originals after a successful conversion"
    )
    parser.add_argument(
        "--live-photos", "-l", action="store_true",
        help=f"Move Live Photo .mov clips into '{config.get_livephoto_folder()}'"
    )
    parser.add_argument(
        "--prefix", "-p", action="store_true",
        help="Prefix file names with their capture date (yyyy-MM-dd_HH-mm_)"
    )
    parser.add_argument(
        "--recursive", "-R", action="store_true",
        help="Also prefix videos in immediate subfolders"
    )
    parser.add_argument(
        "--log", action="store_true",
        help="Write an execution log file into the directory"
    )
    parser.add_argument(
        "--dry-run", "-n", action="store_true",
        help="Preview operations without making changes"
    )
    parser.add_argument(
        "--yes", "-y", action="store_true",
        help="Do not ask for confirmation"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Report progress for every file"
    )
    parser.add_argument(
        "--version", "-V", action="store_true",
        help=f"Display the version number of {PROGRAM} and exit"
    )

    return parser


def show_processing_plan(run_config: RunConfig, console: Console) -> None:
    """Display the processing plan before execution."""
    mode = "DRY RUN" if run_config.dry_run else "APPLY"

    def yes_no(flag: bool) -> str:
        return 'Yes' if flag else 'No'

    console.print("\n[bold]Processing Plan:[/bold]")
    console.print(f"  Directory:         [blue]{run_config.directory}[/blue]")
    console.print(f"  Processing Mode:   [cyan]{mode}[/cyan]")
    console.print(f"  Convert To:        [cyan].{run_config.normalized_extension}[/cyan]")
    console.print(f"  Date Prefix:       [cyan]{yes_no(run_config.prefix)}[/cyan]")
    console.print(f"  Move Live Photos:  [cyan]{yes_no(run_config.move_live_photos)}[/cyan]")
    console.print(f"  Replace Originals: [cyan]{yes_no(run_config.replace_originals)}[/cyan]")
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


def confirm_deletion(originals: List[Path], console: Console) -> bool:
    """Ask before deleting converted originals."""
    console.print(f"[yellow]{len(originals)} original files were converted and can be deleted.[/yellow]")

    try:
        response = console.input("Delete originals? [y/N]: ").strip().lower()
        return response in ['y', 'yes']
    except (EOFError, KeyboardInterrupt):
        console.print("\n[red]Keeping originals[/red]")
        return False


def main(config_path: Optional[Path] = None) -> int:
    """Main entry point.

    Args:
        config_path: Optional path to config file (for testing)
    """
    config = Config(config_path=config_path)
    parser = create_parser(config)
    args = parser.parse_args()

    using_saved_config = args.directory is None

    # Handle version option
    if args.version:
        from . import __version__, __copyright__
        if args.verbose:
            print(f"{PROGRAM} version {__version__} {__copyright__}")
            print(f"Config:  {config.config_path}")
            return 0
        print(__version__)
        return 0

    directory_path = args.directory or config.get_last_directory()
    if not directory_path:
        parser.error("A directory is required")

    directory = Path(directory_path).expanduser().resolve()

    if not directory.exists():
        print(f"Error: Directory does not exist: {directory}")
        return 1

    if not directory.is_dir():
        print(f"Error: Not a directory: {directory}")
        return 1

    # Handle target extension
    if args.extension:
        try:
            extension = parse_extension(args.extension)
        except argparse.ArgumentTypeError as e:
            print(f"Error: {e}")
            return 1
        config.update_target_extension(extension)
    else:
        extension = config.get_target_extension()

    config.update_directory(str(directory))

    run_config = RunConfig(
        directory=directory,
        target_extension=extension,
        replace_originals=args.replace_originals,
        move_live_photos=args.live_photos,
        prefix=args.prefix,
        recursive=args.recursive,
        verbose=args.verbose,
        write_log=args.log,
        dry_run=args.dry_run,
        live_photo_folder=config.get_livephoto_folder(),
    )

    console = get_console()
    if args.verbose or using_saved_config:
        show_processing_plan(run_config, console)

    # Show confirmation when using saved config without --yes flag
    if using_saved_config and not args.yes:
        if not confirm_processing(console):
            return 0  # Exit gracefully

    if args.yes or args.dry_run:
        confirm_delete = None
    else:
        def confirm_delete(originals: List[Path]) -> bool:
            return confirm_deletion(originals, console)

    try:
        prep = PhotoPrep(run_config)
        prep.run(confirm_delete=confirm_delete)
    except PhotoPrepError as e:
        console.print(f"\n[red]Error: {e}[/red]")
        return 1
    except KeyboardInterrupt:
        console.print("\n[red]Operation cancelled by user[/red]")
        return 1

    if not args.verbose:
        return 0

    prep.print_summary()

    failures = prep.stats_manager.get_failures()
    if failures > 0:
        console.print(f"\n[green]✓ Processing completed[/green] [yellow]({failures} files failed)[/yellow]")
    else:
        console.print("\n[green]✓ Processing completed successfully![/green]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
