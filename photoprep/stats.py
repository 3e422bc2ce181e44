"""
Statistics tracking for photoprep runs.
"""

from typing import Dict, Iterable

from .conversion import ConversionResult
from .rename import RenameOutcome, RenameStatus


class StatsManager:
    """Encapsulates statistics tracking for a run."""

    def __init__(self):
        self._stats = {
            'livephoto_clips': 0,
            'renamed': 0,
            'skipped_no_date': 0,
            'already_prefixed': 0,
            'rename_failed': 0,
            'converted': 0,
            'conversion_failed': 0,
            'deleted': 0,
            'move_failed': 0,
            'delete_failed': 0,
        }

    def increment(self, key: str, count: int = 1) -> None:
        self._stats[key] += count

    def record_renames(self, outcomes: Iterable[RenameOutcome]) -> None:
        """Count rename outcomes by category."""
        keys = {
            RenameStatus.RENAMED: 'renamed',
            RenameStatus.SKIPPED_NO_DATE: 'skipped_no_date',
            RenameStatus.ALREADY_PREFIXED: 'already_prefixed',
            RenameStatus.FAILED: 'rename_failed',
        }
        for outcome in outcomes:
            self._stats[keys[outcome.status]] += 1

    def record_conversions(self, results: Iterable[ConversionResult]) -> None:
        """Count successful and failed conversions."""
        for result in results:
            if result.success:
                self._stats['converted'] += 1
            else:
                self._stats['conversion_failed'] += 1

    def get_stats(self) -> Dict[str, int]:
        """Get a copy of current statistics."""
        return self._stats.copy()

    def get(self, key: str) -> int:
        return self._stats[key]

    def get_failures(self) -> int:
        """Total per-file failures across all phases."""
        return (self._stats['rename_failed'] + self._stats['conversion_failed']
                + self._stats['move_failed'] + self._stats['delete_failed'])

    def has_errors(self) -> bool:
        """Check if any file failed in any phase."""
        return self.get_failures() > 0
