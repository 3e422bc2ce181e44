"""Capture-date resolution and date-prefix formatting."""

import re
from datetime import datetime
from typing import Optional

from .constants import DATE_PREFIX_FORMAT, get_logger
from .errors import VideoMetadataError
from .media import MediaFile
from .metadata import PropertyReader, VideoDateReader

logger = get_logger("photoprep.dates")

ENCODED_DATE_FORMAT = "%Y-%m-%d %H:%M:%S UTC"

# EXIF (2023:05:01 10:15:00) and ISO 8601 (2023-05-01T10:15:00.123+02:00) dates
NUMERIC_DATE_PATTERN = re.compile(
    r'(\d{4})[-:](\d{2})[-:](\d{2})[T ](\d{2}):(\d{2})(?::(\d{2}))?'
)
# Windows shell rendering (5/1/2023 10:15 AM)
SHELL_DATE_PATTERN = re.compile(
    r'(\d{1,2})/(\d{1,2})/(\d{4})\s+(\d{1,2}):(\d{2})(?::(\d{2}))?\s*([AaPp][Mm])?'
)
PREFIX_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}_\d{2}-\d{2}_')

# Directional marks the Windows shell embeds in formatted dates
_INVISIBLE_MARKS = dict.fromkeys(map(ord, "\u200e\u200f\u202a\u202b\u202c\u202d\u202e"))


def format_prefix(timestamp: datetime) -> str:
    """Render a timestamp as a yyyy-MM-dd_HH-mm_ filename prefix."""
    return timestamp.strftime(DATE_PREFIX_FORMAT)


def has_date_prefix(filename: str) -> bool:
    """Check whether a filename already starts with a date prefix."""
    return PREFIX_PATTERN.match(filename) is not None


def parse_encoded_date(text: str) -> datetime:
    """Parse a video encoded date such as '2023-05-01 10:15:00 UTC'.

    Raises ValueError for any other shape. The timestamp is returned naive,
    without timezone conversion.
    """
    return datetime.strptime(text.strip(), ENCODED_DATE_FORMAT)


def parse_date_taken(text: Optional[str]) -> Optional[datetime]:
    """Parse a still image's date-taken property, or None if unreadable.

    Timezone offsets are ignored; the wall-clock time is kept as is.
    """
    if not text:
        return None

    cleaned = text.translate(_INVISIBLE_MARKS).replace("\u202f", " ").strip()

    match = NUMERIC_DATE_PATTERN.match(cleaned)
    if match:
        year, month, day, hour, minute, second = match.groups()
        try:
            return datetime(int(year), int(month), int(day),
                            int(hour), int(minute), int(second or 0))
        except ValueError:
            return None

    match = SHELL_DATE_PATTERN.match(cleaned)
    if match:
        month, day, year, hour, minute, second, meridiem = match.groups()
        hour = int(hour)
        if meridiem:
            if not 1 <= hour <= 12:
                return None
            hour = hour % 12 + (12 if meridiem.lower() == "pm" else 0)
        try:
            return datetime(int(year), int(month), int(day),
                            hour, int(minute), int(second or 0))
        except ValueError:
            return None

    return None


class DateResolver:
    """Turns a media file's embedded capture date into a filename prefix."""

    def __init__(self, property_reader: PropertyReader, video_reader: VideoDateReader):
        self.property_reader = property_reader
        self.video_reader = video_reader

    def resolve(self, media_file: MediaFile) -> Optional[str]:
        """Return the date prefix for a file.

        Stills without a readable date give None. Videos without a readable
        encoded date raise VideoMetadataError.
        """
        if media_file.is_video:
            return format_prefix(self._video_date(media_file))

        raw = self.property_reader.get_property(media_file.path, "DateTaken")
        taken = parse_date_taken(raw)
        if taken is None:
            logger.debug(f"No date taken for {media_file.path} (raw: {raw!r})")
            return None
        return format_prefix(taken)

    def _video_date(self, media_file: MediaFile) -> datetime:
        raw = self.video_reader.read_encoded_date(media_file.path)
        if not raw:
            raise VideoMetadataError(media_file.path)
        try:
            return parse_encoded_date(raw)
        except ValueError:
            raise VideoMetadataError(media_file.path, raw)
