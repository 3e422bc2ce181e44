"""
Date-prefix renaming of stills and videos.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Collection, List, Optional

from .constants import get_logger
from .dates import DateResolver, has_date_prefix
from .file_operations import FileOperations
from .media import MediaFile, MediaKind, scan_directory
from .progress import ProgressContext


class RenameStatus(Enum):
    RENAMED = "renamed"
    SKIPPED_NO_DATE = "skipped-no-date"
    ALREADY_PREFIXED = "already-prefixed"
    FAILED = "failed"


@dataclass
class RenameOutcome:
    source: Path
    status: RenameStatus
    destination: Optional[Path] = None
    message: str = ""


class RenamePipeline:
    """Prefixes every still and video in a directory with its capture date."""

    def __init__(self, date_resolver: DateResolver, file_ops: FileOperations,
                 recursive: bool = False):
        self.date_resolver = date_resolver
        self.file_ops = file_ops
        self.recursive = recursive
        self.logger = get_logger()

    def find_renamable(self, source_dir: Path, target_extension: str,
                       exclude: Collection[Path] = ()) -> List[MediaFile]:
        """Stills directly in source_dir, plus videos (one level deeper when recursive).

        Paths in exclude are skipped; a dry run passes the files an earlier
        phase would already have moved away.
        """
        excluded = {path.absolute() for path in exclude}
        renamable = []
        for media_file in scan_directory(source_dir, target_extension, self.recursive):
            if media_file.path in excluded:
                continue
            if media_file.is_video:
                renamable.append(media_file)
            elif (media_file.is_kind(MediaKind.STILL_RENAMABLE)
                  and media_file.path.parent == source_dir.absolute()):
                renamable.append(media_file)
        return renamable

    def rename_all(self, source_dir: Path, target_extension: str,
                   progress_ctx: Optional[ProgressContext] = None,
                   exclude: Collection[Path] = ()) -> List[RenameOutcome]:
        """Rename each file to <date prefix><original name>, in place.

        Every date is resolved before the first rename, so a VideoMetadataError
        leaves the directory untouched.
        """
        candidates = self.find_renamable(source_dir, target_extension, exclude)
        if not candidates:
            self.logger.info("No files to rename")
            return []

        plan = []
        for media_file in candidates:
            if has_date_prefix(media_file.name):
                plan.append((media_file, None))
            else:
                plan.append((media_file, self.date_resolver.resolve(media_file)))

        total = len(plan)
        self.logger.info(f"Renaming {total} files")
        if progress_ctx:
            progress_ctx.start_phase("Renaming files...", total)

        outcomes = []
        for index, (media_file, prefix) in enumerate(plan, start=1):
            outcome = self._rename_one(media_file, prefix)
            outcomes.append(outcome)
            self._report(index, total, outcome)
            if progress_ctx:
                progress_ctx.advance()

        return outcomes

    def _rename_one(self, media_file: MediaFile, prefix: Optional[str]) -> RenameOutcome:
        if has_date_prefix(media_file.name):
            return RenameOutcome(media_file.path, RenameStatus.ALREADY_PREFIXED)

        if prefix is None:
            return RenameOutcome(media_file.path, RenameStatus.SKIPPED_NO_DATE,
                                 message="no date taken")

        dest = media_file.path.with_name(f"{prefix}{media_file.name}")
        if dest.exists():
            return RenameOutcome(media_file.path, RenameStatus.FAILED, dest,
                                 message=f"{dest.name} already exists")

        if self.file_ops.rename_safely(media_file.path, dest):
            return RenameOutcome(media_file.path, RenameStatus.RENAMED, dest)
        return RenameOutcome(media_file.path, RenameStatus.FAILED, dest,
                             message="rename failed")

    def _report(self, index: int, total: int, outcome: RenameOutcome) -> None:
        name = outcome.source.name
        if outcome.status is RenameStatus.RENAMED:
            self.logger.info(f"[{index}/{total}] Renamed {name} -> {outcome.destination.name}")
        elif outcome.status is RenameStatus.SKIPPED_NO_DATE:
            self.logger.info(f"[{index}/{total}] Skipped {name}: no date taken")
        elif outcome.status is RenameStatus.ALREADY_PREFIXED:
            self.logger.info(f"[{index}/{total}] Skipped {name}: already prefixed")
        else:
            self.logger.error(f"[{index}/{total}] Failed to rename {name}: {outcome.message}")
