"""
Metadata readers backed by external command-line tools.

Still images are read through a property lookup (exiftool, or sips on macOS);
videos through MediaInfo's encoded date.
"""

import json
import subprocess
from pathlib import Path
from typing import Dict, Optional, Tuple

from . import constants
from .constants import TOOL_TIMEOUT, get_logger

logger = get_logger("photoprep.metadata")

# Shell property name -> exiftool tags, in priority order
PROPERTY_TAGS: Dict[str, Tuple[str, ...]] = {
    "DateTaken": ("DateTimeOriginal", "CreateDate"),
}

# Shell property name -> sips property
SIPS_PROPERTIES: Dict[str, str] = {
    "DateTaken": "creation",
}


class PropertyReader:
    """Looks up a named metadata property on a still image."""

    def get_property(self, file_path: Path, name: str) -> Optional[str]:
        """Return the property's raw value, or None when it is absent."""
        raise NotImplementedError


class VideoDateReader:
    """Reads the encoded date of a video file."""

    def read_encoded_date(self, file_path: Path) -> Optional[str]:
        """Return the raw encoded-date string, or None when it is absent."""
        raise NotImplementedError


class ShellPropertyReader(PropertyReader):
    """Property lookup using exiftool, with sips as a fallback."""

    def __init__(self):
        self.exiftool_available = constants.check_tool_availability("exiftool", "-ver")
        self.sips_available = constants.check_tool_availability("sips", "--help")
        if not (self.exiftool_available or self.sips_available):
            logger.warning("exiftool and sips unavailable: still images will not be dated")

    def get_property(self, file_path: Path, name: str) -> Optional[str]:
        if self.exiftool_available and name in PROPERTY_TAGS:
            value = self._exiftool_property(file_path, PROPERTY_TAGS[name])
            if value:
                return value

        if self.sips_available and name in SIPS_PROPERTIES:
            return self._sips_property(file_path, SIPS_PROPERTIES[name])

        return None

    def _exiftool_property(self, file_path: Path, tags: Tuple[str, ...]) -> Optional[str]:
        try:
            result = subprocess.run(
                ["exiftool", "-q", "-json"] + [f"-{tag}" for tag in tags] + [str(file_path)],
                capture_output=True, text=True, check=True, timeout=TOOL_TIMEOUT
            )
            data = json.loads(result.stdout)[0]
        except (OSError, subprocess.SubprocessError, json.JSONDecodeError, IndexError) as e:
            logger.debug(f"exiftool failed for {file_path}: {e}")
            return None

        for tag in tags:
            value = data.get(tag)
            if value:
                return str(value).strip()
        return None

    def _sips_property(self, file_path: Path, prop: str) -> Optional[str]:
        try:
            result = subprocess.run(
                ["sips", "-g", prop, str(file_path)],
                capture_output=True, text=True, check=True, timeout=TOOL_TIMEOUT
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"sips failed for {file_path}: {e}")
            return None

        # Output looks like "  creation: 2023:05:01 10:15:00"
        for line in result.stdout.splitlines():
            if f"{prop}:" in line:
                value = line.split(f"{prop}:", 1)[1].strip()
                if value and value != "<nil>":
                    return value
        return None


class MediaInfoReader(VideoDateReader):
    """Encoded date lookup using the MediaInfo command-line tool."""

    def __init__(self):
        self.mediainfo_available = constants.check_tool_availability("mediainfo", "--Version")
        if not self.mediainfo_available:
            logger.warning("mediainfo unavailable: videos cannot be dated")

    def read_encoded_date(self, file_path: Path) -> Optional[str]:
        if not self.mediainfo_available:
            return None

        try:
            result = subprocess.run(
                ["mediainfo", "--Output=General;%Encoded_Date%", str(file_path)],
                capture_output=True, text=True, check=True, timeout=TOOL_TIMEOUT
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"mediainfo failed for {file_path}: {e}")
            return None

        value = result.stdout.strip()
        if not value:
            return None

        # Older MediaInfo builds put the zone designator first
        if value.startswith("UTC "):
            value = f"{value[4:]} UTC"
        return value
