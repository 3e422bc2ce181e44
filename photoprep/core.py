"""
Core pipeline: live photo clips, date prefixes, conversion, original cleanup.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from rich.logging import RichHandler
from rich.progress import Progress
from rich.table import Table

from .collisions import CollisionResolver
from .config import RunConfig
from .constants import get_console, get_logger
from .conversion import ConversionOrchestrator, ConversionResult, ImageConverter, MagickConverter
from .dates import DateResolver
from .errors import InvalidDirectoryError, NothingToConvertError
from .file_operations import FileOperations
from .livephoto import LivePhotoOrganizer, LivePhotoResult
from .media import find_convertible
from .metadata import MediaInfoReader, PropertyReader, ShellPropertyReader, VideoDateReader
from .progress import ProgressContext
from .rename import RenameOutcome, RenamePipeline
from .runlog import RunLog
from .stats import StatsManager


@dataclass
class RunReport:
    """Results of each phase of a run."""
    livephotos: Optional[LivePhotoResult] = None
    renames: List[RenameOutcome] = field(default_factory=list)
    conversions: List[ConversionResult] = field(default_factory=list)
    deleted: List[Path] = field(default_factory=list)


class PhotoPrep:
    """Runs the phases over one directory, in order, each on a fresh listing."""

    def __init__(self, run_config: RunConfig,
                 property_reader: Optional[PropertyReader] = None,
                 video_reader: Optional[VideoDateReader] = None,
                 converter: Optional[ImageConverter] = None):
        self.run_config = run_config
        self.directory = run_config.directory
        self.extension = run_config.normalized_extension
        self.stats_manager = StatsManager()
        self.report = RunReport()

        # Console shows per-file progress only when verbose; fatal errors are printed by the CLI
        self.console = get_console()
        self.logger = get_logger()
        for handler in list(self.logger.handlers):
            if isinstance(handler, RichHandler):
                self.logger.removeHandler(handler)
        console_handler = RichHandler(console=self.console, show_path=False)
        console_handler.setLevel(logging.INFO if run_config.verbose else logging.CRITICAL)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        self.logger.addHandler(console_handler)
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        self.file_ops = FileOperations(dry_run=run_config.dry_run)
        self.collision_resolver = CollisionResolver()
        self.date_resolver = DateResolver(
            property_reader=property_reader or ShellPropertyReader(),
            video_reader=video_reader or MediaInfoReader(),
        )
        self.livephoto_organizer = LivePhotoOrganizer(self.file_ops, self.collision_resolver)
        self.rename_pipeline = RenamePipeline(self.date_resolver, self.file_ops,
                                              recursive=run_config.recursive)
        self.conversion = ConversionOrchestrator(converter or MagickConverter(),
                                                 self.file_ops, self.collision_resolver)
        self.run_log = RunLog(self.directory)

    def validate(self) -> None:
        """Check the directory before any phase touches it."""
        if not self.directory.is_dir():
            raise InvalidDirectoryError(self.directory)
        if not find_convertible(self.directory, self.extension):
            raise NothingToConvertError(self.directory)

    def run(self, confirm_delete: Optional[Callable[[List[Path]], bool]] = None) -> RunReport:
        """Run every enabled phase; fatal errors propagate and stop the run."""
        self.validate()

        write_log = self.run_config.write_log and not self.run_config.dry_run
        if write_log:
            try:
                self.run_log.attach(self.logger)
            except OSError as e:
                self.logger.warning(f"Could not write log file {self.run_log.log_path}: {e}")
                write_log = False

        success = False
        try:
            self.logger.info(f"Starting run in {self.directory}")
            self.logger.info(f"Mode: {'DRY RUN' if self.run_config.dry_run else 'APPLY'}")

            with Progress(console=self.console, disable=not self.run_config.verbose) as progress:
                progress_ctx = ProgressContext(progress)

                if self.run_config.move_live_photos:
                    self.move_livephotos(progress_ctx)

                if self.run_config.prefix:
                    self.rename_files(progress_ctx)

                self.convert_images(progress_ctx)

            if self.run_config.replace_originals:
                self.delete_originals(confirm_delete)

            success = True
            return self.report
        finally:
            if write_log:
                self.logger.info(f"Run {'completed' if success else 'aborted'}")
                self.run_log.detach(self.logger)

    def move_livephotos(self, progress_ctx: Optional[ProgressContext] = None) -> LivePhotoResult:
        result = self.livephoto_organizer.organize(self.directory, self.run_config.livephoto_dir,
                                                   progress_ctx)
        self.stats_manager.increment('livephoto_clips', result.count)
        self.stats_manager.increment('move_failed', len(result.failed))
        self.report.livephotos = result
        return result

    def rename_files(self, progress_ctx: Optional[ProgressContext] = None) -> List[RenameOutcome]:
        # A dry run leaves moved clips in place; keep them out of the rename plan
        claimed = []
        if self.run_config.dry_run and self.report.livephotos is not None:
            claimed = [source for source, _ in self.report.livephotos.moved]
        outcomes = self.rename_pipeline.rename_all(self.directory, self.extension, progress_ctx,
                                                   exclude=claimed)
        self.stats_manager.record_renames(outcomes)
        self.report.renames = outcomes
        return outcomes

    def convert_images(self, progress_ctx: Optional[ProgressContext] = None) -> List[ConversionResult]:
        results = self.conversion.convert_all(self.directory, self.extension, progress_ctx)
        self.stats_manager.record_conversions(results)
        self.report.conversions = results
        return results

    def delete_originals(self, confirm_delete: Optional[Callable[[List[Path]], bool]] = None) -> List[Path]:
        """Delete the originals of successful conversions only."""
        originals = [r.source for r in self.report.conversions if r.success]
        if not originals:
            self.logger.info("No converted originals to delete")
            return []

        if confirm_delete is not None and not confirm_delete(originals):
            self.logger.warning("Keeping original files")
            return []

        total = len(originals)
        for index, original in enumerate(originals, start=1):
            if self.file_ops.delete_safely(original):
                self.report.deleted.append(original)
                self.stats_manager.increment('deleted')
                self.logger.info(f"[{index}/{total}] Deleted original {original.name}")
            else:
                self.stats_manager.increment('delete_failed')

        return self.report.deleted

    def print_summary(self) -> None:
        """Print processing summary."""
        table = Table(title="Processing Summary")
        table.add_column("Category", style="cyan")
        table.add_column("Count", style="green")

        stats = self.stats_manager
        if self.run_config.move_live_photos:
            table.add_row("Live Photo Clips Moved", str(stats.get('livephoto_clips')))
        if self.run_config.prefix:
            table.add_row("Renamed", str(stats.get('renamed')))
            table.add_row("Skipped (No Date)", str(stats.get('skipped_no_date')))
            table.add_row("Already Prefixed", str(stats.get('already_prefixed')))
        table.add_row("Converted", str(stats.get('converted')))
        if self.run_config.replace_originals:
            table.add_row("Originals Deleted", str(stats.get('deleted')))
        table.add_row("Failed", str(stats.get_failures()))

        self.console.print(table)

        if self.run_config.write_log and not self.run_config.dry_run:
            self.console.print(f"Log written to: {self.run_log.log_path}")
