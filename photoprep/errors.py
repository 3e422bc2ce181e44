"""
Fatal error types for photoprep runs.

Per-file problems (a failed conversion, a rename target that already exists)
are recorded in phase results instead of being raised.
"""

from pathlib import Path
from typing import Optional


class PhotoPrepError(Exception):
    """Base error for the project."""


class InvalidDirectoryError(PhotoPrepError):
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Not a directory: {path}")


class NothingToConvertError(PhotoPrepError):
    def __init__(self, directory: Path):
        self.directory = directory
        super().__init__(f"No .png or .heic files to convert in {directory}")


class VideoMetadataError(PhotoPrepError):
    """Raised when a video's encoded date is missing or unparseable."""

    def __init__(self, path: Path, raw_value: Optional[str] = None):
        self.path = path
        self.raw_value = raw_value
        if raw_value:
            detail = f"unparseable encoded date {raw_value!r}"
        else:
            detail = "no encoded date"
        super().__init__(f"Could not read video metadata for {path}: {detail}")
