"""
Configuration management for photoprep.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import yaml

from .constants import DEFAULT_LIVEPHOTO_FOLDER, DEFAULT_TARGET_EXTENSION, PROGRAM


class Config:
    """Manages configuration file for storing user preferences."""

    def __init__(self, config_path: Optional[Path] = None):
        # Default config location: ~/.<PROGRAM>/config.yml
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = Path.home() / f".{PROGRAM}" / "config.yml"
        self.program_root = self.config_path.parent
        self.data = self._load_config()

    def _load_config(self) -> Dict:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, 'r') as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger = logging.getLogger(PROGRAM)
            logger.warning(f"Could not load config: {e}")
            return {}

    def save_config(self) -> None:
        """Save current configuration to file."""
        try:
            self.program_root.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w') as f:
                yaml.safe_dump(self.data, f, default_flow_style=False)
        except (OSError, yaml.YAMLError) as e:
            logger = logging.getLogger(PROGRAM)
            logger.error(f"Could not save config: {e}")

    def get_last_directory(self) -> Optional[str]:
        """Get the last processed directory."""
        return self.data.get('last_directory')

    def get_target_extension(self) -> str:
        """Get the saved target extension (default: jpg)."""
        return self.data.get('target_extension', DEFAULT_TARGET_EXTENSION)

    def get_livephoto_folder(self) -> str:
        """Get the name of the folder that receives live photo clips."""
        return self.data.get('live_photo_folder', DEFAULT_LIVEPHOTO_FOLDER)

    def update_directory(self, directory: str) -> None:
        """Update and save the last processed directory."""
        self.data['last_directory'] = directory
        self.save_config()

    def update_target_extension(self, extension: str) -> None:
        """Update and save the target extension."""
        self.data['target_extension'] = extension
        self.save_config()


@dataclass(frozen=True)
class RunConfig:
    """Settings for a single run, passed to every phase."""
    directory: Path
    target_extension: str = DEFAULT_TARGET_EXTENSION
    replace_originals: bool = False
    move_live_photos: bool = False
    prefix: bool = False
    recursive: bool = False
    verbose: bool = False
    write_log: bool = False
    dry_run: bool = False
    live_photo_folder: str = DEFAULT_LIVEPHOTO_FOLDER

    @property
    def normalized_extension(self) -> str:
        """Target extension without the leading dot, lower-cased."""
        return self.target_extension.lstrip('.').lower()

    @property
    def livephoto_dir(self) -> Path:
        return self.directory / self.live_photo_folder
