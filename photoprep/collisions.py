"""
Destination paths that never overwrite an existing file.
"""

from pathlib import Path
from typing import Collection

from .constants import COLLISION_MARKER


class CollisionResolver:
    """Picks a free destination path by adding a marker before the extension.

    IMG_01.jpg -> IMG_01 - New.jpg -> IMG_01 - New (2).jpg -> ...
    """

    def __init__(self, marker: str = COLLISION_MARKER):
        self.marker = marker

    def resolve(self, candidate: Path, reserved: Collection[Path] = ()) -> Path:
        """Return candidate if it is free, else the first free disambiguated path.

        Paths in reserved count as taken even if nothing is on disk there yet.
        """
        def taken(path: Path) -> bool:
            return path in reserved or path.exists()

        if not taken(candidate):
            return candidate

        stem = candidate.stem
        suffix = candidate.suffix
        dest_path = candidate.with_name(f"{stem}{self.marker}{suffix}")
        counter = 2
        while taken(dest_path):
            dest_path = candidate.with_name(f"{stem}{self.marker} ({counter}){suffix}")
            counter += 1
        return dest_path
