"""
photoprep - Date-prefix, convert and tidy phone media backups.

Renames photos and videos with their capture date, converts .png/.heic
stills to a common format and moves Live Photo clips into their own folder.

MIT License.
"""

__version__ = "1.0.0"
__copyright__ = "Copyright (c) 2025 The photoprep authors"


# Public API
from .cli import main
from .collisions import CollisionResolver
from .config import Config, RunConfig
from .conversion import ConversionOrchestrator, MagickConverter
from .core import PhotoPrep
from .dates import DateResolver
from .livephoto import LivePhotoOrganizer
from .rename import RenamePipeline

__all__ = [ "main", "Config", "RunConfig", "CollisionResolver", "ConversionOrchestrator",
            "MagickConverter", "PhotoPrep", "DateResolver", "LivePhotoOrganizer", "RenamePipeline" ]
