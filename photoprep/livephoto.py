"""
Live Photo companion clip handling.

A phone exports a Live Photo as a still (IMG_0001.HEIC) plus a short clip
with the same stem (IMG_0001.MOV). The clips are moved into their own folder
so the remaining pipeline treats the still on its own.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .collisions import CollisionResolver
from .constants import LIVEPHOTO_STILL_EXTENSIONS, LIVEPHOTO_VIDEO_EXTENSION, get_logger
from .file_operations import FileOperations
from .progress import ProgressContext


@dataclass
class LivePhotoResult:
    """Outcome of a live photo pass: (source, destination) for every clip moved."""
    moved: List[Tuple[Path, Path]] = field(default_factory=list)
    failed: List[Path] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.moved)


class LivePhotoOrganizer:
    """Moves the motion clips of Live Photos into a sibling folder."""

    def __init__(self, file_ops: FileOperations, collision_resolver: CollisionResolver):
        self.file_ops = file_ops
        self.collision_resolver = collision_resolver
        self.logger = get_logger()

    def find_companions(self, source_dir: Path) -> List[Tuple[Path, Path]]:
        """Pair each still in source_dir with its same-stem .mov clip, if any."""
        stills = []
        clips: Dict[str, Path] = {}

        for file_path in sorted(source_dir.iterdir()):
            if not file_path.is_file():
                continue
            ext = file_path.suffix.lower()
            if ext in LIVEPHOTO_STILL_EXTENSIONS:
                stills.append(file_path)
            elif ext == LIVEPHOTO_VIDEO_EXTENSION:
                clips[file_path.stem.lower()] = file_path

        pairs = []
        for still in stills:
            clip = clips.pop(still.stem.lower(), None)
            if clip is not None:
                pairs.append((still, clip))
        return pairs

    def organize(self, source_dir: Path, dest_dir: Path,
                 progress_ctx: Optional[ProgressContext] = None) -> LivePhotoResult:
        """Move every companion clip found in source_dir into dest_dir."""
        result = LivePhotoResult()
        pairs = self.find_companions(source_dir)

        if not pairs:
            self.logger.info("No Live Photo clips found")
            return result

        self.logger.info(f"Detected {len(pairs)} Live Photo pairs")
        if progress_ctx:
            progress_ctx.start_phase("Moving Live Photo clips...", len(pairs))

        for index, (still, clip) in enumerate(pairs, start=1):
            target = self.collision_resolver.resolve(dest_dir / clip.name)

            if self.file_ops.move_file_safely(clip, target):
                result.moved.append((clip, target))
                self.logger.info(f"[{index}/{len(pairs)}] Moved Live Photo clip of "
                                 f"{still.name}: {clip.name} -> {target.parent.name}/{target.name}")
            else:
                result.failed.append(clip)
                self.logger.error(f"[{index}/{len(pairs)}] Could not move {clip.name}")

            if progress_ctx:
                progress_ctx.advance()

        return result
