"""
Media file model and directory scanning.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import FrozenSet, Iterator, List

from .constants import CONVERTIBLE_EXTENSIONS, RENAMABLE_STILL_EXTENSIONS, VIDEO_EXTENSIONS


class MediaKind(Enum):
    STILL_CONVERTIBLE = "still-convertible"
    STILL_RENAMABLE = "still-renamable"
    VIDEO = "video"


def classify(path: Path, target_extension: str) -> FrozenSet[MediaKind]:
    """Return the kinds a file belongs to, judged by its extension alone."""
    ext = path.suffix.lower()
    target = f".{target_extension.lstrip('.').lower()}"
    kinds = set()
    if ext in CONVERTIBLE_EXTENSIONS and ext != target:
        kinds.add(MediaKind.STILL_CONVERTIBLE)
    if ext in RENAMABLE_STILL_EXTENSIONS or ext == target:
        kinds.add(MediaKind.STILL_RENAMABLE)
    if ext in VIDEO_EXTENSIONS:
        kinds.add(MediaKind.VIDEO)
    return frozenset(kinds)


@dataclass(frozen=True)
class MediaFile:
    """A media file found during a scan. Rebuilt from the filesystem each phase."""
    path: Path
    kinds: FrozenSet[MediaKind]

    @classmethod
    def from_path(cls, path: Path, target_extension: str) -> "MediaFile":
        return cls(path=path.absolute(), kinds=classify(path, target_extension))

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def extension(self) -> str:
        return self.path.suffix.lower()

    @property
    def is_video(self) -> bool:
        return MediaKind.VIDEO in self.kinds

    def is_kind(self, kind: MediaKind) -> bool:
        return kind in self.kinds


def _iter_files(directory: Path, recursive: bool) -> Iterator[Path]:
    for entry in directory.iterdir():
        if entry.is_file():
            yield entry
        elif recursive and entry.is_dir():
            # One level deep only
            for child in entry.iterdir():
                if child.is_file():
                    yield child


def scan_directory(directory: Path, target_extension: str,
                   recursive: bool = False) -> List[MediaFile]:
    """Snapshot the media files in a directory, sorted by path."""
    media_files = []
    for file_path in _iter_files(directory, recursive):
        media_file = MediaFile.from_path(file_path, target_extension)
        if media_file.kinds:
            media_files.append(media_file)
    return sorted(media_files, key=lambda m: str(m.path))


def find_convertible(directory: Path, target_extension: str) -> List[MediaFile]:
    """Stills in a directory (non-recursive) that can be converted to the target."""
    return [m for m in scan_directory(directory, target_extension)
            if m.is_kind(MediaKind.STILL_CONVERTIBLE)]
